"""Fare policy: what a passenger pays for their next leg of the day."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.config import Config


class FarePolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    single_trip_price: int = Field(default=10000, ge=0)
    round_trip_price: int = Field(default=18000, ge=0)

    @model_validator(mode="after")
    def round_trip_covers_single(self) -> "FarePolicy":
        if self.round_trip_price < self.single_trip_price:
            raise ValueError("round_trip_price must be >= single_trip_price")
        return self

    @classmethod
    def from_config(cls, config: Config) -> "FarePolicy":
        return cls(single_trip_price=config.single_trip_price, round_trip_price=config.round_trip_price)

    @property
    def completion_price(self) -> int:
        """Charge for the leg that completes an already started round trip."""
        return self.round_trip_price - self.single_trip_price

    def fare(self, trips_already_today: int) -> int:
        if trips_already_today < 0:
            raise ValueError(f"trip count cannot be negative: {trips_already_today}")
        if trips_already_today == 0:
            return self.single_trip_price
        return self.completion_price
