"""
Parking API — ParkingSession SQLAlchemy Model
==============================================

What:  ORM model for the `parking_sessions` table: one car's stay in one lot.
Who:   Written by ParkingService (entry/exit); read by ReportService.

Lifecycle:
    1. Created on car entry: entry_time set, exit_time and fee NULL (open)
    2. Closed on car exit: exit_time and fee set together
    3. Never deleted: closed sessions are the source of every report

Query Patterns:
    - Incoming report:  WHERE entry_time BETWEEN :start AND :end
      → idx_parking_sessions_entry_time
    - Outgoing/revenue: WHERE exit_time BETWEEN :start AND :end
      → idx_parking_sessions_exit_time
    - Occupancy:        WHERE parking_lot_id = :lot AND exit_time IS NULL
      → idx_parking_sessions_lot_exit
    - Entry:            WHERE car_id = :car AND exit_time IS NULL
      → uq_parking_sessions_open_car (partial unique: one open session per car)
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from parking_api.database import Base


class ParkingSession(Base):
    __tablename__ = "parking_sessions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    car_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("cars.id", ondelete="RESTRICT"), nullable=False
    )
    parking_lot_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("parking_lots.id", ondelete="RESTRICT"), nullable=False
    )

    entry_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    exit_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    fee: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True, default=None)

    car: Mapped["Car"] = relationship(back_populates="sessions", lazy="raise")  # noqa: F821
    parking_lot: Mapped["ParkingLot"] = relationship(  # noqa: F821
        back_populates="sessions", lazy="raise"
    )

    __table_args__ = (
        Index("idx_parking_sessions_entry_time", "entry_time"),
        Index("idx_parking_sessions_exit_time", "exit_time"),
        Index("idx_parking_sessions_lot_exit", "parking_lot_id", "exit_time"),
        # At most one open session per car, enforced by the database
        Index(
            "uq_parking_sessions_open_car",
            "car_id",
            unique=True,
            postgresql_where=text("exit_time IS NULL"),
            sqlite_where=text("exit_time IS NULL"),
        ),
    )

    @property
    def is_open(self) -> bool:
        return self.exit_time is None

    def __repr__(self) -> str:
        return (
            f"<ParkingSession(id={self.id}, car_id={self.car_id}, "
            f"entry_time='{self.entry_time}', exit_time='{self.exit_time}')>"
        )
