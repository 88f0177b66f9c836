"""
Parking API — Parking Session Route Handlers
=============================================

What:  Car entry and exit, plus session lookup.

Request Flow (exit):
    1. authenticate (401 without a valid token)
    2. ParkingService.register_exit: lock session, set exit_time, compute fee
    3. 200 with the closed session, fee included
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from parking_api.auth import authenticate
from parking_api.database import get_db_session
from parking_api.schemas.common import ErrorResponse, ValidationErrorResponse
from parking_api.schemas.parking import EntryRequest, SessionResponse
from parking_api.services.parking_service import parking_service

router = APIRouter(
    prefix="/api/parking-sessions",
    tags=["Parking Sessions"],
    dependencies=[Depends(authenticate)],
    responses={401: {"description": "Not authenticated", "model": ErrorResponse}},
)


@router.post(
    "/entry",
    status_code=201,
    response_model=SessionResponse,
    responses={
        400: {"description": "Invalid input", "model": ValidationErrorResponse},
        404: {"description": "Unknown plate or parking lot", "model": ErrorResponse},
        409: {"description": "Car already parked or lot full", "model": ErrorResponse},
    },
    summary="Record a car entering a parking lot",
)
async def register_entry(
    data: EntryRequest,
    db: AsyncSession = Depends(get_db_session),
) -> SessionResponse:
    return await parking_service.register_entry(db, data)


@router.post(
    "/{session_id}/exit",
    response_model=SessionResponse,
    responses={
        404: {"description": "Session not found", "model": ErrorResponse},
        409: {"description": "Session already closed", "model": ErrorResponse},
    },
    summary="Record a car leaving; computes the fee",
)
async def register_exit(
    session_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> SessionResponse:
    return await parking_service.register_exit(db, session_id)


@router.get("", response_model=List[SessionResponse], summary="List sessions, newest first")
async def list_sessions(
    active: Optional[bool] = Query(default=None, description="true: open only, false: closed only"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db_session),
) -> List[SessionResponse]:
    return await parking_service.list_sessions(db, active=active, limit=limit, offset=offset)


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    responses={404: {"description": "Session not found", "model": ErrorResponse}},
    summary="Get a parking session",
)
async def get_session(
    session_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> SessionResponse:
    return await parking_service.get_session(db, session_id)
