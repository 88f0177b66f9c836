"""
Parking API — Car SQLAlchemy Model
===================================

What:  ORM model for the `cars` table: licence plate plus owner contact info.
How:   Plates are normalized (upper-case, no spaces or dashes) before they are
       stored or looked up, so "ab-123 cd" and "AB123CD" are the same car.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import DateTime, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from parking_api.database import Base


def normalize_plate(plate: str) -> str:
    return "".join(ch for ch in plate.upper() if ch.isalnum())


class Car(Base):
    __tablename__ = "cars"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    plate: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)

    owner_name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    owner_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    sessions: Mapped[List["ParkingSession"]] = relationship(  # noqa: F821
        back_populates="car",
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<Car(id={self.id}, plate='{self.plate}')>"
