"""Leg repository: departures, returns and their passenger line items."""

from datetime import date, datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from core.models.ledger import LegKind

from ..schemas.legs import Departure, DeparturePassenger, Return, ReturnPassenger

LegRow = Departure | Return
ItemRow = DeparturePassenger | ReturnPassenger

_LEG_MODELS: dict[LegKind, type[Departure] | type[Return]] = {
    LegKind.DEPARTURE: Departure,
    LegKind.RETURN: Return,
}


class LegRepository:
    """Repository for trip legs of either kind."""

    def __init__(self, session: Session):
        self.session = session

    def find(self, kind: LegKind, driver_id: int, trip_date: date) -> LegRow | None:
        model = _LEG_MODELS[kind]
        stmt = select(model).where(model.driver_id == driver_id, model.trip_date == trip_date)
        return self.session.execute(stmt).scalar_one_or_none()

    def create(self, kind: LegKind, driver_id: int, trip_date: date, created_at: datetime) -> LegRow:
        """Insert a leg and flush so the (driver, day) constraint is checked now."""
        leg = _LEG_MODELS[kind](driver_id=driver_id, trip_date=trip_date, created_at=created_at)
        self.session.add(leg)
        self.session.flush()
        return leg

    def clear_items(self, leg: LegRow) -> int:
        if isinstance(leg, Departure):
            stmt = delete(DeparturePassenger).where(DeparturePassenger.departure_id == leg.id)
        else:
            stmt = delete(ReturnPassenger).where(ReturnPassenger.return_id == leg.id)
        result = self.session.execute(stmt.execution_options(synchronize_session=False))
        # A cached collection would still hold the deleted rows.
        self.session.expire(leg, ["passengers"])
        return result.rowcount or 0

    def add_item(self, kind: LegKind, leg_id: int, passenger_name: str, price: int) -> ItemRow:
        item: ItemRow
        if kind is LegKind.DEPARTURE:
            item = DeparturePassenger(departure_id=leg_id, passenger_name=passenger_name, price=price)
        else:
            item = ReturnPassenger(return_id=leg_id, passenger_name=passenger_name, price=price)
        self.session.add(item)
        return item

    def list_on(self, kind: LegKind, trip_date: date) -> list[LegRow]:
        """Legs of one kind on a day, with driver and line items loaded."""
        model = _LEG_MODELS[kind]
        stmt = (
            select(model)
            .where(model.trip_date == trip_date)
            .options(selectinload(model.driver), selectinload(model.passengers))
            .order_by(model.id)
        )
        return list(self.session.execute(stmt).scalars().all())

    def list_all(self, kind: LegKind) -> list[LegRow]:
        model = _LEG_MODELS[kind]
        stmt = (
            select(model)
            .options(selectinload(model.driver), selectinload(model.passengers))
            .order_by(model.trip_date, model.id)
        )
        return list(self.session.execute(stmt).scalars().all())
