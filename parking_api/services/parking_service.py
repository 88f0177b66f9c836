"""
Parking API — Parking Service (Lots, Entry, Exit)
==================================================

What:  Manages parking lots and the session lifecycle: car entry opens a
       session, car exit closes it and computes the fee.
Who:   Called by routes/parking_lots.py and routes/parking_sessions.py.

Entry Flow (POST /api/parking-sessions/entry):
    ┌──────────┐    ┌──────────────┐    ┌─────────────────┐    ┌──────────┐
    │ Find car │───▶│ Lock lot row │───▶│ Already parked? │───▶│  Insert  │
    │ by plate │    │ (FOR UPDATE) │    │ Lot full?       │    │ session  │
    └──────────┘    └──────────────┘    └─────────────────┘    └──────────┘

    Locking the lot row serializes concurrent entries into the same lot on
    PostgreSQL, so the capacity check and the insert cannot interleave.
    SQLite ignores FOR UPDATE; it serializes writers on its own.
    Two entries for the same car into different lots lock different rows;
    the partial unique index on open sessions per car rejects the second
    insert, which surfaces as ConflictError.

Fee Rule:
    fee = hourly_rate × billable_hours
    billable_hours = elapsed time rounded UP to whole hours, minimum 1
    e.g. 10 minutes → 1h, 60 minutes → 1h, 61 minutes → 2h
"""

import logging
import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from parking_api.exceptions import ConflictError, NotFoundError, ParkingAPIError, PersistenceError
from parking_api.models.car import Car
from parking_api.models.parking_lot import ParkingLot
from parking_api.models.parking_session import ParkingSession
from parking_api.schemas.parking import (
    EntryRequest,
    ParkingLotCreate,
    ParkingLotResponse,
    SessionResponse,
)
from parking_api.timeutils import as_utc, utcnow

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def billable_hours(entry_time: datetime, exit_time: datetime) -> int:
    seconds = (as_utc(exit_time) - as_utc(entry_time)).total_seconds()
    return max(1, math.ceil(seconds / 3600))


def compute_fee(hourly_rate: Decimal, entry_time: datetime, exit_time: datetime) -> Decimal:
    hours = billable_hours(entry_time, exit_time)
    return (Decimal(hourly_rate) * hours).quantize(CENTS, rounding=ROUND_HALF_UP)


def session_to_response(session: ParkingSession, car: Car, lot: ParkingLot) -> SessionResponse:
    return SessionResponse(
        id=session.id,
        car_id=car.id,
        plate=car.plate,
        parking_lot_id=lot.id,
        parking_lot_name=lot.name,
        entry_time=session.entry_time,
        exit_time=session.exit_time,
        fee=session.fee,
        is_active=session.is_open,
    )


class ParkingService:
    """
    Error Handling Strategy:
        NotFoundError / ConflictError propagate unchanged; SQLAlchemy errors
        are wrapped in PersistenceError (generic 500, details logged).
    """

    # ── Parking lots ──────────────────────────────────────────────────────

    async def create_lot(self, db: AsyncSession, data: ParkingLotCreate) -> ParkingLotResponse:
        try:
            existing = await db.execute(select(ParkingLot.id).where(ParkingLot.name == data.name))
            if existing.scalar_one_or_none() is not None:
                raise ConflictError(message=f"A parking lot named '{data.name}' already exists")
            lot = ParkingLot(**data.model_dump())
            db.add(lot)
            await db.flush()
            logger.info("Created parking lot %s (%s, capacity=%d)", lot.id, lot.name, lot.capacity)
            return ParkingLotResponse.model_validate(lot)

        except ParkingAPIError:
            raise
        except IntegrityError:
            raise ConflictError(message=f"A parking lot named '{data.name}' already exists")
        except SQLAlchemyError as e:
            logger.error("Database error creating parking lot: %s", str(e), exc_info=True)
            raise PersistenceError(context={"operation": "create_lot", "error_type": type(e).__name__})

    async def list_lots(self, db: AsyncSession) -> List[ParkingLotResponse]:
        try:
            result = await db.execute(select(ParkingLot).order_by(ParkingLot.name))
            return [ParkingLotResponse.model_validate(lot) for lot in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing parking lots: %s", str(e), exc_info=True)
            raise PersistenceError(context={"operation": "list_lots"})

    async def get_lot(self, db: AsyncSession, lot_id: UUID) -> ParkingLotResponse:
        try:
            lot = await db.get(ParkingLot, lot_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching parking lot %s: %s", lot_id, str(e))
            raise PersistenceError(context={"parking_lot_id": str(lot_id)})
        if lot is None:
            raise NotFoundError(resource="parking lot", resource_id=str(lot_id))
        return ParkingLotResponse.model_validate(lot)

    # ── Sessions ──────────────────────────────────────────────────────────

    async def register_entry(
        self,
        db: AsyncSession,
        data: EntryRequest,
        entry_time: Optional[datetime] = None,
    ) -> SessionResponse:
        """
        Open a session for the car with `data.plate` in `data.parking_lot_id`.

        Args:
            entry_time: override for the entry timestamp (defaults to now, UTC)

        Raises:
            NotFoundError: unknown plate or parking lot (→ 404)
            ConflictError: car already has an open session, or lot is full (→ 409)
            PersistenceError: database failure (→ 500)
        """
        try:
            car = (
                await db.execute(select(Car).where(Car.plate == data.plate))
            ).scalar_one_or_none()
            if car is None:
                raise NotFoundError(resource="car", resource_id=data.plate)

            lot = (
                await db.execute(
                    select(ParkingLot)
                    .where(ParkingLot.id == data.parking_lot_id)
                    .with_for_update()
                )
            ).scalar_one_or_none()
            if lot is None:
                raise NotFoundError(resource="parking lot", resource_id=str(data.parking_lot_id))

            open_for_car = await db.execute(
                select(ParkingSession.id).where(
                    ParkingSession.car_id == car.id,
                    ParkingSession.exit_time.is_(None),
                )
            )
            if open_for_car.first() is not None:
                raise ConflictError(
                    message=f"Car '{car.plate}' is already parked",
                    context={"car_id": str(car.id)},
                )

            occupied = (
                await db.execute(
                    select(func.count(ParkingSession.id)).where(
                        ParkingSession.parking_lot_id == lot.id,
                        ParkingSession.exit_time.is_(None),
                    )
                )
            ).scalar_one()
            if occupied >= lot.capacity:
                raise ConflictError(
                    message=f"Parking lot '{lot.name}' is full",
                    context={"parking_lot_id": str(lot.id), "capacity": lot.capacity},
                )

            session = ParkingSession(
                car_id=car.id,
                parking_lot_id=lot.id,
                entry_time=entry_time or utcnow(),
            )
            db.add(session)
            await db.flush()
            logger.info("Car %s entered lot %s (session %s)", car.plate, lot.name, session.id)
            return session_to_response(session, car, lot)

        except ParkingAPIError:
            raise
        except IntegrityError:
            # A concurrent entry for the same car won uq_parking_sessions_open_car
            raise ConflictError(
                message=f"Car '{data.plate}' is already parked",
                context={"plate": data.plate},
            )
        except SQLAlchemyError as e:
            logger.error("Database error registering entry: %s", str(e), exc_info=True)
            raise PersistenceError(context={"operation": "register_entry", "error_type": type(e).__name__})

    async def register_exit(
        self,
        db: AsyncSession,
        session_id: UUID,
        exit_time: Optional[datetime] = None,
    ) -> SessionResponse:
        """
        Close an open session: set exit_time and compute the fee together.

        Raises:
            NotFoundError: unknown session (→ 404)
            ConflictError: session already closed (→ 409)
        """
        try:
            session = (
                await db.execute(
                    select(ParkingSession)
                    .options(selectinload(ParkingSession.car), selectinload(ParkingSession.parking_lot))
                    .where(ParkingSession.id == session_id)
                    .with_for_update()
                )
            ).scalar_one_or_none()
            if session is None:
                raise NotFoundError(resource="parking session", resource_id=str(session_id))
            if session.exit_time is not None:
                raise ConflictError(
                    message="This parking session has already been closed",
                    context={"session_id": str(session_id)},
                )

            closed_at = as_utc(exit_time) if exit_time else utcnow()
            session.exit_time = closed_at
            session.fee = compute_fee(session.parking_lot.hourly_rate, session.entry_time, closed_at)
            await db.flush()
            logger.info(
                "Car %s left lot %s: fee=%s (session %s)",
                session.car.plate,
                session.parking_lot.name,
                session.fee,
                session.id,
            )
            return session_to_response(session, session.car, session.parking_lot)

        except ParkingAPIError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error registering exit: %s", str(e), exc_info=True)
            raise PersistenceError(context={"operation": "register_exit", "error_type": type(e).__name__})

    async def get_session(self, db: AsyncSession, session_id: UUID) -> SessionResponse:
        try:
            session = (
                await db.execute(
                    select(ParkingSession)
                    .options(selectinload(ParkingSession.car), selectinload(ParkingSession.parking_lot))
                    .where(ParkingSession.id == session_id)
                )
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching session %s: %s", session_id, str(e))
            raise PersistenceError(context={"session_id": str(session_id)})
        if session is None:
            raise NotFoundError(resource="parking session", resource_id=str(session_id))
        return session_to_response(session, session.car, session.parking_lot)

    async def list_sessions(
        self,
        db: AsyncSession,
        active: Optional[bool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[SessionResponse]:
        """List sessions newest entry first; `active` filters open/closed."""
        query = select(ParkingSession).options(
            selectinload(ParkingSession.car), selectinload(ParkingSession.parking_lot)
        )
        if active is True:
            query = query.where(ParkingSession.exit_time.is_(None))
        elif active is False:
            query = query.where(ParkingSession.exit_time.is_not(None))
        query = query.order_by(ParkingSession.entry_time.desc()).limit(limit).offset(offset)

        try:
            result = await db.execute(query)
            sessions = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing sessions: %s", str(e), exc_info=True)
            raise PersistenceError(context={"operation": "list_sessions"})
        return [session_to_response(s, s.car, s.parking_lot) for s in sessions]


parking_service = ParkingService()
