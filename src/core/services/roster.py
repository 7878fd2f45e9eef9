"""Roster service: driver and passenger registration and lookups."""

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.db.repositories import RosterRepository
from core.db.transaction import transaction
from core.db.utils import local_date, utc_now
from core.errors import ErrorCode, RosterError, ValidationError
from core.models.roster import DriverEntry, PassengerEntry

logger = logging.getLogger(__name__)


def clean_name(name: str, what: str) -> str:
    cleaned = " ".join((name or "").split())
    if not cleaned:
        raise ValidationError(f"{what} name is empty", code=ErrorCode.MALFORMED_INPUT)
    return cleaned


class RosterService:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        timezone: str = "Asia/Jakarta",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._timezone = timezone
        self._clock = clock

    def register_driver(self, name: str) -> DriverEntry:
        name = clean_name(name, "Driver")
        with self._session_factory() as session, transaction(session):
            try:
                driver = RosterRepository(session).add_driver(name, self._clock())
            except IntegrityError as e:
                raise RosterError(f"Driver '{name}' already registered", code=ErrorCode.DUPLICATE_KEY) from e
            entry = DriverEntry(id=driver.id, name=driver.name, registered_at=driver.created_at)
        logger.info("Registered driver %s", name)
        return entry

    def register_passenger(self, name: str) -> PassengerEntry:
        name = clean_name(name, "Passenger")
        with self._session_factory() as session, transaction(session):
            try:
                passenger = RosterRepository(session).add_passenger(name, self._clock())
            except IntegrityError as e:
                raise RosterError(f"Passenger '{name}' already registered", code=ErrorCode.DUPLICATE_KEY) from e
            entry = PassengerEntry(name=passenger.name, registered_at=passenger.created_at)
        logger.info("Registered passenger %s", name)
        return entry

    def driver_exists(self, name: str) -> bool:
        name = clean_name(name, "Driver")
        with self._session_factory() as session, transaction(session, writing=False):
            return RosterRepository(session).driver_exists(name)

    def list_drivers(self) -> list[DriverEntry]:
        """All drivers, newest first."""
        with self._session_factory() as session, transaction(session, writing=False):
            return [
                DriverEntry(id=d.id, name=d.name, registered_at=d.created_at)
                for d in RosterRepository(session).list_drivers()
            ]

    def list_passengers(self) -> list[PassengerEntry]:
        """All passengers, newest first."""
        with self._session_factory() as session, transaction(session, writing=False):
            return [
                PassengerEntry(name=p.name, registered_at=p.created_at)
                for p in RosterRepository(session).list_passengers()
            ]

    def trip_count_today(self, passenger_name: str) -> int:
        today = local_date(self._clock(), self._timezone)
        with self._session_factory() as session, transaction(session, writing=False):
            return RosterRepository(session).trip_count(passenger_name, today)
