"""Pydantic models for daily trip reports."""

from datetime import date

from pydantic import BaseModel, computed_field

from core.models.ledger import LineItem


class DriverReport(BaseModel):
    driver_name: str
    departures: list[LineItem] = []
    returns: list[LineItem] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def subtotal(self) -> int:
        return sum(item.fare for item in self.departures) + sum(item.fare for item in self.returns)


class DailyReport(BaseModel):
    trip_date: date
    drivers: list[DriverReport]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def grand_total(self) -> int:
        return sum(driver.subtotal for driver in self.drivers)
