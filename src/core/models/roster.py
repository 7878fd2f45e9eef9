from datetime import datetime

from pydantic import BaseModel, Field


class DriverEntry(BaseModel):
    id: int
    name: str = Field(..., min_length=1)
    registered_at: datetime


class PassengerEntry(BaseModel):
    name: str = Field(..., min_length=1)
    registered_at: datetime
