"""
Pydantic models for Angkot Ledger.
"""

from core.models.ledger import LegKind, LegRecord, LineItem
from core.models.report import DailyReport, DriverReport
from core.models.roster import DriverEntry, PassengerEntry

__all__ = [
    "DailyReport",
    "DriverEntry",
    "DriverReport",
    "LegKind",
    "LegRecord",
    "LineItem",
    "PassengerEntry",
]
