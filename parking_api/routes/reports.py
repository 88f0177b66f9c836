"""
Parking API — Report Route Handlers
====================================

What:  Admin-only reports over parking sessions.
How:   Each route runs the same ordered chain before its handler:

    authenticate ──▶ authorize_admin ──▶ validate_query(Model) ──▶ handler
       401              403                   400

    Route-level `dependencies=[...]` are resolved before the handler's own
    parameters, which is what puts the auth checks ahead of validation.

Endpoints:
    GET /api/reports/outgoing?startDate&endDate            sessions exited in range
    GET /api/reports/incoming?startDate&endDate            sessions entered in range
    GET /api/reports/occupancy                             open sessions vs capacity per lot
    GET /api/reports/revenue?startDate&endDate&groupBy     fee totals, groupBy ∈ {parking, day}
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from parking_api.auth import authorize_admin
from parking_api.database import get_db_session
from parking_api.schemas.common import ErrorResponse, ValidationErrorResponse
from parking_api.schemas.report import (
    GROUP_BY_VALUES,
    DateRangeQuery,
    OccupancyReportResponse,
    RevenueQuery,
    RevenueReportResponse,
    SessionReportResponse,
)
from parking_api.services.report_service import report_service
from parking_api.validation import validate_query

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/reports",
    tags=["Reports"],
    dependencies=[Depends(authorize_admin)],
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        403: {"description": "Not authorized", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
)

# The query models are applied by a dependency, so FastAPI cannot infer the
# parameters for the OpenAPI document; declare them explicitly.
_DATE_PARAMETERS = [
    {
        "in": "query",
        "name": "startDate",
        "required": True,
        "schema": {"type": "string", "format": "date"},
        "description": "Start date (YYYY-MM-DD or ISO 8601), inclusive",
    },
    {
        "in": "query",
        "name": "endDate",
        "required": True,
        "schema": {"type": "string", "format": "date"},
        "description": "End date (YYYY-MM-DD or ISO 8601), inclusive",
    },
]
_GROUP_BY_PARAMETER = {
    "in": "query",
    "name": "groupBy",
    "required": False,
    "schema": {"type": "string", "enum": list(GROUP_BY_VALUES)},
    "description": "Group results by parking or day",
}
_INVALID_INPUT = {400: {"description": "Invalid input", "model": ValidationErrorResponse}}


@router.get(
    "/outgoing",
    response_model=SessionReportResponse,
    responses=_INVALID_INPUT,
    openapi_extra={"parameters": _DATE_PARAMETERS},
    summary="Report of outgoing cars in a date range",
)
async def get_outgoing_cars_by_date_range(
    query: DateRangeQuery = Depends(validate_query(DateRangeQuery)),
    db: AsyncSession = Depends(get_db_session),
) -> SessionReportResponse:
    return await report_service.get_outgoing_cars(db, query.start_date, query.end_date)


@router.get(
    "/incoming",
    response_model=SessionReportResponse,
    responses=_INVALID_INPUT,
    openapi_extra={"parameters": _DATE_PARAMETERS},
    summary="Report of incoming cars in a date range",
)
async def get_incoming_cars_by_date_range(
    query: DateRangeQuery = Depends(validate_query(DateRangeQuery)),
    db: AsyncSession = Depends(get_db_session),
) -> SessionReportResponse:
    return await report_service.get_incoming_cars(db, query.start_date, query.end_date)


@router.get(
    "/occupancy",
    response_model=OccupancyReportResponse,
    summary="Current parking occupancy per lot",
)
async def get_parking_occupancy_report(
    db: AsyncSession = Depends(get_db_session),
) -> OccupancyReportResponse:
    return await report_service.get_occupancy(db)


@router.get(
    "/revenue",
    response_model=RevenueReportResponse,
    responses=_INVALID_INPUT,
    openapi_extra={"parameters": _DATE_PARAMETERS + [_GROUP_BY_PARAMETER]},
    summary="Revenue report, optionally grouped by parking lot or day",
)
async def get_revenue_report(
    query: RevenueQuery = Depends(validate_query(RevenueQuery)),
    db: AsyncSession = Depends(get_db_session),
) -> RevenueReportResponse:
    return await report_service.get_revenue(db, query.start_date, query.end_date, query.group_by)
