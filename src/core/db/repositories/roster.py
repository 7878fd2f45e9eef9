"""Roster repository: drivers, passengers and daily trip counts."""

from datetime import date, datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..schemas.legs import Departure, DeparturePassenger, Return, ReturnPassenger
from ..schemas.roster import Driver, Passenger


class RosterRepository:
    """Repository for driver and passenger rows."""

    def __init__(self, session: Session):
        self.session = session

    def add_driver(self, name: str, created_at: datetime) -> Driver:
        driver = Driver(name=name, created_at=created_at)
        self.session.add(driver)
        self.session.flush()
        return driver

    def add_passenger(self, name: str, created_at: datetime) -> Passenger:
        passenger = Passenger(name=name, created_at=created_at)
        self.session.add(passenger)
        self.session.flush()
        return passenger

    def find_driver(self, name: str, lock: bool = False) -> Driver | None:
        """Get driver by name; ``lock`` holds its row until the transaction ends."""
        stmt = select(Driver).where(Driver.name == name)
        if lock:
            stmt = stmt.with_for_update()
        return self.session.execute(stmt).scalar_one_or_none()

    def driver_exists(self, name: str) -> bool:
        stmt = select(func.count()).select_from(Driver).where(Driver.name == name)
        return self.session.execute(stmt).scalar_one() > 0

    def list_drivers(self) -> list[Driver]:
        stmt = select(Driver).order_by(Driver.created_at.desc(), Driver.id.desc())
        return list(self.session.execute(stmt).scalars().all())

    def list_passengers(self) -> list[Passenger]:
        stmt = select(Passenger).order_by(Passenger.created_at.desc(), Passenger.id.desc())
        return list(self.session.execute(stmt).scalars().all())

    def trip_count(self, passenger_name: str, trip_date: date) -> int:
        """Departure plus return line items for a passenger on a day, across all drivers."""
        departures = (
            select(func.count())
            .select_from(DeparturePassenger)
            .join(Departure, DeparturePassenger.departure_id == Departure.id)
            .where(DeparturePassenger.passenger_name == passenger_name, Departure.trip_date == trip_date)
        )
        returns = (
            select(func.count())
            .select_from(ReturnPassenger)
            .join(Return, ReturnPassenger.return_id == Return.id)
            .where(ReturnPassenger.passenger_name == passenger_name, Return.trip_date == trip_date)
        )
        return self.session.execute(departures).scalar_one() + self.session.execute(returns).scalar_one()
