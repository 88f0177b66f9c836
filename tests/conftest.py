"""
Parking API — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Each test gets its own SQLite database file (aiosqlite) with all
       tables created from the ORM metadata, and an app instance whose
       `get_db_session` dependency is overridden to use that database.

Fixture Hierarchy (all function-scoped):
    ├── engine / session_factory: per-test SQLite database
    ├── db_session: session for seeding and service-level tests
    ├── app / client: FastAPI app + HTTPX AsyncClient (no server, no lifespan)
    ├── admin_token / user_token: signed bearer tokens
    └── make_lot / make_car / make_session: row factories
"""

import os

# Override settings BEFORE any parking_api import: the settings singleton and
# the module-level engine are created at import time.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-that-is-long-enough-for-hs256"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import parking_api.models  # noqa: F401  (registers tables)
from parking_api.database import Base, get_db_session
from parking_api.main import create_app
from parking_api.models.car import Car
from parking_api.models.parking_lot import ParkingLot
from parking_api.models.parking_session import ParkingSession
from parking_api.security import create_access_token


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def engine(tmp_path):
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# App & HTTP client
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(session_factory):
    application = create_app()

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_get_db_session
    return application


@pytest_asyncio.fixture
async def client(app):
    """
    Usage:
        async def test_health(client):
            response = await client.get("/health")
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ══════════════════════════════════════════════════════════════════════════
# Tokens
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def admin_token():
    return create_access_token(subject=str(uuid4()), role="admin", email="admin@example.com")


@pytest.fixture
def user_token():
    return create_access_token(subject=str(uuid4()), role="user", email="user@example.com")


# ══════════════════════════════════════════════════════════════════════════
# Row factories
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_lot(db_session):
    counter = {"n": 0}

    async def _make_lot(
        name: Optional[str] = None,
        capacity: int = 10,
        hourly_rate: str = "2.50",
        location: str = "Main Street",
    ) -> ParkingLot:
        counter["n"] += 1
        lot = ParkingLot(
            name=name or f"Lot {counter['n']}",
            location=location,
            capacity=capacity,
            hourly_rate=Decimal(hourly_rate),
        )
        db_session.add(lot)
        await db_session.commit()
        return lot

    return _make_lot


@pytest.fixture
def make_car(db_session):
    counter = {"n": 0}

    async def _make_car(plate: Optional[str] = None, owner_name: str = "Jane Doe") -> Car:
        counter["n"] += 1
        car = Car(plate=plate or f"CAR{counter['n']:03d}", owner_name=owner_name)
        db_session.add(car)
        await db_session.commit()
        return car

    return _make_car


@pytest.fixture
def make_session(db_session):
    async def _make_session(
        car: Car,
        lot: ParkingLot,
        entry_time: datetime,
        exit_time: Optional[datetime] = None,
        fee: Optional[str] = None,
    ) -> ParkingSession:
        session = ParkingSession(
            car_id=car.id,
            parking_lot_id=lot.id,
            entry_time=entry_time,
            exit_time=exit_time,
            fee=Decimal(fee) if fee is not None else None,
        )
        db_session.add(session)
        await db_session.commit()
        return session

    return _make_session
