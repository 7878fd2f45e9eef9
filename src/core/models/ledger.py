from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, computed_field


class LegKind(str, Enum):
    DEPARTURE = "departure"
    RETURN = "return"

    @property
    def label(self) -> str:
        return "Antar" if self is LegKind.DEPARTURE else "Jemput"


class LineItem(BaseModel):
    passenger_name: str = Field(..., min_length=1)
    fare: int = Field(..., ge=0)


class LegRecord(BaseModel):
    """Outcome of recording one leg: the line items now stored for it."""

    leg_id: int
    kind: LegKind
    driver_name: str
    trip_date: date
    recorded_at: datetime
    replaced: bool = False
    items: list[LineItem]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        return sum(item.fare for item in self.items)
