"""
Parking API — ParkingLot SQLAlchemy Model
==========================================

What:  ORM model for the `parking_lots` table.
Why capacity lives here: occupancy is never stored. It is derived on demand
as the number of sessions in this lot without an exit time, and compared
against `capacity` at entry time and in the occupancy report.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from sqlalchemy import CheckConstraint, DateTime, Integer, Numeric, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from parking_api.database import Base


class ParkingLot(Base):
    __tablename__ = "parking_lots"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False)

    capacity: Mapped[int] = mapped_column(Integer, nullable=False)

    # Price per started hour, in the deployment's currency
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    sessions: Mapped[List["ParkingSession"]] = relationship(  # noqa: F821
        back_populates="parking_lot",
        lazy="raise",
    )

    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_parking_lots_capacity_positive"),
        CheckConstraint("hourly_rate >= 0", name="ck_parking_lots_rate_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<ParkingLot(id={self.id}, name='{self.name}', capacity={self.capacity})>"
