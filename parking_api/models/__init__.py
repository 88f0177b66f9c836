"""
Parking API — ORM Models
=========================

Importing this package registers every table with `Base.metadata`, which
Alembic's autogenerate and the test suite's `create_all` both rely on.
"""

from parking_api.models.user import User
from parking_api.models.car import Car
from parking_api.models.parking_lot import ParkingLot
from parking_api.models.parking_session import ParkingSession

__all__ = ["User", "Car", "ParkingLot", "ParkingSession"]
