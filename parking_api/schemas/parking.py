"""
Parking API — Parking Lot & Session Schemas
============================================

What:  Contracts for lot management and for car entry/exit.

SessionResponse is shared with the incoming/outgoing reports, so a session
looks the same whether it came from /api/parking-sessions or /api/reports.
"""

import uuid
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from parking_api.models.car import normalize_plate
from parking_api.schemas.common import UTCDateTime


class ParkingLotCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    location: str = Field(min_length=1, max_length=255)
    capacity: int = Field(gt=0, le=100_000, description="Number of spaces")
    hourly_rate: Decimal = Field(ge=0, max_digits=10, decimal_places=2, description="Price per started hour")


class ParkingLotResponse(BaseModel):
    id: uuid.UUID
    name: str
    location: str
    capacity: int
    hourly_rate: Decimal
    created_at: UTCDateTime

    model_config = {"from_attributes": True}


class EntryRequest(BaseModel):
    """Car entry: identifies the car by plate so gate hardware needs no ids."""
    plate: str = Field(min_length=1, max_length=20)
    parking_lot_id: uuid.UUID

    @field_validator("plate")
    @classmethod
    def validate_plate(cls, v: str) -> str:
        plate = normalize_plate(v)
        if not plate:
            raise ValueError("Plate must contain at least one letter or digit")
        return plate


class SessionResponse(BaseModel):
    id: uuid.UUID
    car_id: uuid.UUID
    plate: str
    parking_lot_id: uuid.UUID
    parking_lot_name: str
    entry_time: UTCDateTime
    exit_time: Optional[UTCDateTime] = None
    fee: Optional[Decimal] = None
    is_active: bool
