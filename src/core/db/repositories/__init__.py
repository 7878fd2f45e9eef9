from .legs import LegRepository
from .roster import RosterRepository

__all__ = ["LegRepository", "RosterRepository"]
