"""
Parking API — Car Route Handlers
=================================
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from parking_api.auth import authenticate
from parking_api.database import get_db_session
from parking_api.schemas.car import CarCreate, CarResponse
from parking_api.schemas.common import ErrorResponse, ValidationErrorResponse
from parking_api.services.car_service import car_service

router = APIRouter(
    prefix="/api/cars",
    tags=["Cars"],
    dependencies=[Depends(authenticate)],
    responses={401: {"description": "Not authenticated", "model": ErrorResponse}},
)


@router.post(
    "",
    status_code=201,
    response_model=CarResponse,
    responses={
        400: {"description": "Invalid input", "model": ValidationErrorResponse},
        409: {"description": "Plate already registered", "model": ErrorResponse},
    },
    summary="Register a car",
)
async def create_car(
    data: CarCreate,
    db: AsyncSession = Depends(get_db_session),
) -> CarResponse:
    return await car_service.create_car(db, data)


@router.get("", response_model=List[CarResponse], summary="List cars by plate")
async def list_cars(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db_session),
) -> List[CarResponse]:
    return await car_service.list_cars(db, limit=limit, offset=offset)


@router.get(
    "/{car_id}",
    response_model=CarResponse,
    responses={404: {"description": "Car not found", "model": ErrorResponse}},
    summary="Get a car",
)
async def get_car(
    car_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> CarResponse:
    return await car_service.get_car(db, car_id)
