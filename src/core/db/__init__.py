"""
Database ORM models and clients for Angkot Ledger.

Importing this package registers all models on Base.metadata,
which Alembic needs for autogenerate.
"""

from core.db.database import LedgerDatabase, get_database
from core.db.schemas.base import Base
from core.db.schemas.legs import Departure, DeparturePassenger, Return, ReturnPassenger
from core.db.schemas.roster import Driver, Passenger

__all__ = [
    "Base",
    "Departure",
    "DeparturePassenger",
    "Driver",
    "LedgerDatabase",
    "Passenger",
    "Return",
    "ReturnPassenger",
    "get_database",
]
