"""
Parking API — Report Service
=============================

What:  The four admin reports: incoming cars, outgoing cars, current
       occupancy, and revenue with optional grouping.
Why:   All filtering and aggregation is pushed into SQL; Python only shapes
       the rows into response models.
Who:   Called by routes/reports.py after authenticate → authorize → validate.

Queries:
    incoming:   WHERE entry_time BETWEEN :start AND :end ORDER BY entry_time
    outgoing:   WHERE exit_time  BETWEEN :start AND :end ORDER BY exit_time
    occupancy:  parking_lots LEFT JOIN open sessions GROUP BY lot
    revenue:    SUM(fee), COUNT(*) over sessions exited in range,
                optionally GROUP BY lot or GROUP BY date(exit_time)

    BETWEEN is inclusive on both ends. Each query runs on its own; no
    transaction spans a report.

Error Handling:
    Any SQLAlchemy error becomes PersistenceError (→ 500, generic message).
    No retries and no partial results.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import and_, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from parking_api.exceptions import PersistenceError
from parking_api.models.parking_lot import ParkingLot
from parking_api.models.parking_session import ParkingSession
from parking_api.schemas.report import (
    GROUP_BY_DAY,
    GROUP_BY_PARKING,
    LotOccupancy,
    OccupancyReportResponse,
    RevenueGroup,
    RevenueReportResponse,
    SessionReportResponse,
)
from parking_api.services.parking_service import CENTS, session_to_response
from parking_api.timeutils import utcnow

logger = logging.getLogger(__name__)


def _as_day(value) -> date:
    # PostgreSQL returns a date; SQLite's date() returns 'YYYY-MM-DD'
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _money(value: Optional[Decimal]) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENTS)


class ReportService:

    async def _sessions_between(
        self,
        db: AsyncSession,
        column,
        start: datetime,
        end: datetime,
        operation: str,
    ) -> SessionReportResponse:
        query = (
            select(ParkingSession)
            .options(selectinload(ParkingSession.car), selectinload(ParkingSession.parking_lot))
            .where(column.is_not(None), column.between(start, end))
            .order_by(column.asc())
        )
        try:
            result = await db.execute(query)
            sessions = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error in %s report: %s", operation, str(e), exc_info=True)
            raise PersistenceError(context={"operation": operation, "error_type": type(e).__name__})

        items = [session_to_response(s, s.car, s.parking_lot) for s in sessions]
        logger.info("%s report %s → %s: %d sessions", operation, start, end, len(items))
        return SessionReportResponse(start_date=start, end_date=end, count=len(items), sessions=items)

    async def get_outgoing_cars(self, db: AsyncSession, start: datetime, end: datetime) -> SessionReportResponse:
        """Sessions whose exit_time falls within [start, end]."""
        return await self._sessions_between(db, ParkingSession.exit_time, start, end, "outgoing")

    async def get_incoming_cars(self, db: AsyncSession, start: datetime, end: datetime) -> SessionReportResponse:
        """Sessions whose entry_time falls within [start, end]."""
        return await self._sessions_between(db, ParkingSession.entry_time, start, end, "incoming")

    async def get_occupancy(self, db: AsyncSession) -> OccupancyReportResponse:
        """
        One entry per parking lot, including lots with no sessions at all.

        The LEFT JOIN condition (not a WHERE clause) carries the
        `exit_time IS NULL` filter; otherwise empty lots would drop out.
        """
        occupied = func.count(ParkingSession.id)
        query = (
            select(ParkingLot, occupied)
            .outerjoin(
                ParkingSession,
                and_(
                    ParkingSession.parking_lot_id == ParkingLot.id,
                    ParkingSession.exit_time.is_(None),
                ),
            )
            .group_by(ParkingLot.id)
            .order_by(ParkingLot.name)
        )
        try:
            rows = (await db.execute(query)).all()
        except SQLAlchemyError as e:
            logger.error("Database error in occupancy report: %s", str(e), exc_info=True)
            raise PersistenceError(context={"operation": "occupancy", "error_type": type(e).__name__})

        lots: List[LotOccupancy] = []
        for lot, count in rows:
            lots.append(
                LotOccupancy(
                    parking_lot_id=lot.id,
                    name=lot.name,
                    location=lot.location,
                    capacity=lot.capacity,
                    occupied=count,
                    available=max(lot.capacity - count, 0),
                    occupancy_rate=round(count / lot.capacity, 4) if lot.capacity else 0.0,
                )
            )
        return OccupancyReportResponse(
            generated_at=utcnow(),
            total_capacity=sum(lot.capacity for lot in lots),
            total_occupied=sum(lot.occupied for lot in lots),
            lots=lots,
        )

    async def get_revenue(
        self,
        db: AsyncSession,
        start: datetime,
        end: datetime,
        group_by: Optional[str] = None,
    ) -> RevenueReportResponse:
        """
        Sum fees of sessions exited within [start, end].

        group_by:
            None:      totals only, `groups` is empty
            "parking": one group per lot that earned revenue in the range
            "day":     one group per UTC calendar day of exit

        The total is computed by its own query, so sum(groups) == total is a
        property of the data, not of Python arithmetic.
        """
        in_range = and_(
            ParkingSession.exit_time.is_not(None),
            ParkingSession.exit_time.between(start, end),
            ParkingSession.fee.is_not(None),
        )
        try:
            total_row = (
                await db.execute(
                    select(func.sum(ParkingSession.fee), func.count(ParkingSession.id)).where(in_range)
                )
            ).one()

            groups: List[RevenueGroup] = []
            if group_by == GROUP_BY_PARKING:
                rows = (
                    await db.execute(
                        select(
                            ParkingLot.id,
                            ParkingLot.name,
                            func.sum(ParkingSession.fee),
                            func.count(ParkingSession.id),
                        )
                        .join(ParkingLot, ParkingLot.id == ParkingSession.parking_lot_id)
                        .where(in_range)
                        .group_by(ParkingLot.id, ParkingLot.name)
                        .order_by(ParkingLot.name)
                    )
                ).all()
                groups = [
                    RevenueGroup(
                        parking_lot_id=lot_id,
                        parking_lot_name=name,
                        revenue=_money(revenue),
                        session_count=count,
                    )
                    for lot_id, name, revenue, count in rows
                ]
            elif group_by == GROUP_BY_DAY:
                day = func.date(ParkingSession.exit_time).label("day")
                rows = (
                    await db.execute(
                        select(day, func.sum(ParkingSession.fee), func.count(ParkingSession.id))
                        .where(in_range)
                        .group_by(day)
                        .order_by(day)
                    )
                ).all()
                groups = [
                    RevenueGroup(day=_as_day(value), revenue=_money(revenue), session_count=count)
                    for value, revenue, count in rows
                ]
        except SQLAlchemyError as e:
            logger.error("Database error in revenue report: %s", str(e), exc_info=True)
            raise PersistenceError(context={"operation": "revenue", "error_type": type(e).__name__})

        total, session_count = total_row
        return RevenueReportResponse(
            start_date=start,
            end_date=end,
            group_by=group_by,
            total_revenue=_money(total),
            session_count=session_count,
            groups=groups,
        )


report_service = ReportService()
