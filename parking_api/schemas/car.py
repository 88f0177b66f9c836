"""
Parking API — Car Schemas
==========================
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from parking_api.models.car import normalize_plate
from parking_api.schemas.common import UTCDateTime


class CarCreate(BaseModel):
    plate: str = Field(min_length=1, max_length=20, description="Licence plate; normalized to upper-case alphanumerics")
    owner_name: str = Field(min_length=1, max_length=255)
    owner_email: Optional[str] = Field(default=None, max_length=255)
    owner_phone: Optional[str] = Field(default=None, max_length=50)

    @field_validator("plate")
    @classmethod
    def validate_plate(cls, v: str) -> str:
        plate = normalize_plate(v)
        if not plate:
            raise ValueError("Plate must contain at least one letter or digit")
        return plate


class CarResponse(BaseModel):
    id: uuid.UUID
    plate: str
    owner_name: str
    owner_email: Optional[str] = None
    owner_phone: Optional[str] = None
    created_at: UTCDateTime

    model_config = {"from_attributes": True}
