"""SQLAlchemy ORM models for trip legs and their passenger line items.

Departures and returns live in separate tables with the same shape. Each
leg table is unique on (driver_id, trip_date): one leg per driver, kind and
calendar day.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.db.schemas.base import Base
from core.db.schemas.roster import Driver
from core.db.utils import utc_now


class Departure(Base):
    __tablename__ = "departures"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    driver_id: Mapped[int] = mapped_column(Integer, ForeignKey("drivers.id"), nullable=False)
    trip_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, server_default=func.now()
    )

    driver: Mapped[Driver] = relationship()
    passengers: Mapped[list[DeparturePassenger]] = relationship(
        back_populates="leg",
        cascade="all, delete-orphan",
        order_by="DeparturePassenger.id",
    )

    __table_args__ = (
        UniqueConstraint("driver_id", "trip_date", name="uq_departures_driver_day"),
        Index("idx_departures_trip_date", "trip_date"),
    )


class DeparturePassenger(Base):
    __tablename__ = "departure_passengers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    departure_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("departures.id", ondelete="CASCADE"), nullable=False
    )
    passenger_name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)

    leg: Mapped[Departure] = relationship(back_populates="passengers")

    __table_args__ = (
        Index("idx_departure_passengers_departure_id", "departure_id"),
        Index("idx_departure_passengers_name", "passenger_name"),
    )


class Return(Base):
    __tablename__ = "returns"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    driver_id: Mapped[int] = mapped_column(Integer, ForeignKey("drivers.id"), nullable=False)
    trip_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, server_default=func.now()
    )

    driver: Mapped[Driver] = relationship()
    passengers: Mapped[list[ReturnPassenger]] = relationship(
        back_populates="leg",
        cascade="all, delete-orphan",
        order_by="ReturnPassenger.id",
    )

    __table_args__ = (
        UniqueConstraint("driver_id", "trip_date", name="uq_returns_driver_day"),
        Index("idx_returns_trip_date", "trip_date"),
    )


class ReturnPassenger(Base):
    __tablename__ = "return_passengers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    return_id: Mapped[int] = mapped_column(Integer, ForeignKey("returns.id", ondelete="CASCADE"), nullable=False)
    passenger_name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)

    leg: Mapped[Return] = relationship(back_populates="passengers")

    __table_args__ = (
        Index("idx_return_passengers_return_id", "return_id"),
        Index("idx_return_passengers_name", "passenger_name"),
    )
