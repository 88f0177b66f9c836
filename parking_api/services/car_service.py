"""
Parking API — Car Service
==========================

What:  Registers cars and looks them up by id.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from parking_api.exceptions import ConflictError, NotFoundError, ParkingAPIError, PersistenceError
from parking_api.models.car import Car
from parking_api.schemas.car import CarCreate, CarResponse

logger = logging.getLogger(__name__)


class CarService:

    async def create_car(self, db: AsyncSession, data: CarCreate) -> CarResponse:
        try:
            existing = await db.execute(select(Car.id).where(Car.plate == data.plate))
            if existing.scalar_one_or_none() is not None:
                raise ConflictError(
                    message=f"A car with plate '{data.plate}' is already registered",
                    context={"plate": data.plate},
                )
            car = Car(**data.model_dump())
            db.add(car)
            await db.flush()
            logger.info("Registered car %s (%s)", car.id, car.plate)
            return CarResponse.model_validate(car)

        except ParkingAPIError:
            raise
        except IntegrityError:
            raise ConflictError(message=f"A car with plate '{data.plate}' is already registered")
        except SQLAlchemyError as e:
            logger.error("Database error creating car: %s", str(e), exc_info=True)
            raise PersistenceError(context={"operation": "create_car", "error_type": type(e).__name__})

    async def list_cars(self, db: AsyncSession, limit: int = 50, offset: int = 0) -> List[CarResponse]:
        try:
            result = await db.execute(
                select(Car).order_by(Car.plate).limit(limit).offset(offset)
            )
            return [CarResponse.model_validate(car) for car in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing cars: %s", str(e), exc_info=True)
            raise PersistenceError(context={"operation": "list_cars"})

    async def get_car(self, db: AsyncSession, car_id: UUID) -> CarResponse:
        try:
            result = await db.execute(select(Car).where(Car.id == car_id))
            car = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching car %s: %s", car_id, str(e))
            raise PersistenceError(context={"car_id": str(car_id)})
        if car is None:
            raise NotFoundError(resource="car", resource_id=str(car_id))
        return CarResponse.model_validate(car)


car_service = CarService()
