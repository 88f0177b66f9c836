"""
Parking API — Parking Lot Route Handlers
=========================================

Any authenticated user may read lots; only admins may create them.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from parking_api.auth import authenticate, authorize_admin
from parking_api.database import get_db_session
from parking_api.schemas.common import ErrorResponse, ValidationErrorResponse
from parking_api.schemas.parking import ParkingLotCreate, ParkingLotResponse
from parking_api.services.parking_service import parking_service

router = APIRouter(
    prefix="/api/parking-lots",
    tags=["Parking Lots"],
    responses={401: {"description": "Not authenticated", "model": ErrorResponse}},
)


@router.post(
    "",
    status_code=201,
    response_model=ParkingLotResponse,
    dependencies=[Depends(authorize_admin)],
    responses={
        400: {"description": "Invalid input", "model": ValidationErrorResponse},
        403: {"description": "Not authorized", "model": ErrorResponse},
        409: {"description": "Name already used", "model": ErrorResponse},
    },
    summary="Create a parking lot (admin)",
)
async def create_lot(
    data: ParkingLotCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ParkingLotResponse:
    return await parking_service.create_lot(db, data)


@router.get(
    "",
    response_model=List[ParkingLotResponse],
    dependencies=[Depends(authenticate)],
    summary="List parking lots",
)
async def list_lots(db: AsyncSession = Depends(get_db_session)) -> List[ParkingLotResponse]:
    return await parking_service.list_lots(db)


@router.get(
    "/{lot_id}",
    response_model=ParkingLotResponse,
    dependencies=[Depends(authenticate)],
    responses={404: {"description": "Parking lot not found", "model": ErrorResponse}},
    summary="Get a parking lot",
)
async def get_lot(
    lot_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> ParkingLotResponse:
    return await parking_service.get_lot(db, lot_id)
