"""
Parking API — Endpoint Flow Tests
==================================

What:  Auth, car, lot and session endpoints over HTTP, ending with a full
       register → enter → exit → report walk-through.
"""

import pytest

from parking_api.services.auth_service import auth_service

ADMIN_EMAIL = "admin@parking.test"
ADMIN_PASSWORD = "admin-password-1"


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def register_and_login(client, email="driver@example.com", password="driver-pass-1"):
    response = await client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "full_name": "Dana Driver"},
    )
    assert response.status_code == 201
    response = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()["access_token"]


class TestAuthEndpoints:

    @pytest.mark.asyncio
    async def test_register(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "New.User@Example.com", "password": "long-enough", "full_name": "New User"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "new.user@example.com"
        assert body["role"] == "user"
        assert "password" not in body
        assert "password_hash" not in body

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client):
        payload = {"email": "twice@example.com", "password": "long-enough", "full_name": "Twice"}
        await client.post("/api/auth/register", json=payload)

        response = await client.post("/api/auth/register", json=payload)

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_invalid_body_lists_every_field(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "not-an-email", "password": "short"},
        )

        assert response.status_code == 400
        errors = {e["field"]: e["message"] for e in response.json()["errors"]}
        assert errors["email"] == "Email must be a valid email address"
        assert errors["password"] == "Password must be at least 8 characters long"
        assert errors["full_name"] == "Field required"

    @pytest.mark.asyncio
    async def test_login_and_me(self, client):
        token = await register_and_login(client)

        response = await client.get("/api/auth/me", headers=bearer(token))

        assert response.status_code == 200
        assert response.json()["email"] == "driver@example.com"

    @pytest.mark.asyncio
    async def test_wrong_password(self, client):
        await register_and_login(client)

        response = await client.post(
            "/api/auth/login", json={"email": "driver@example.com", "password": "wrong-pass-1"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_unknown_email_same_message(self, client):
        response = await client.post(
            "/api/auth/login", json={"email": "ghost@example.com", "password": "whatever-1"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"


class TestResourceEndpoints:

    @pytest.mark.asyncio
    async def test_cars_require_token(self, client):
        response = await client.get("/api/cars")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_user_cannot_create_lot(self, client, user_token):
        response = await client.post(
            "/api/parking-lots",
            json={"name": "Roof", "location": "Tower", "capacity": 5, "hourly_rate": "3.00"},
            headers=bearer(user_token),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_lot_validation(self, client, admin_token):
        response = await client.post(
            "/api/parking-lots",
            json={"name": "Roof", "location": "Tower", "capacity": 0, "hourly_rate": "-1"},
            headers=bearer(admin_token),
        )

        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["errors"]}
        assert fields == {"capacity", "hourly_rate"}

    @pytest.mark.asyncio
    async def test_duplicate_plate(self, client, user_token):
        payload = {"plate": "ab 12 cd", "owner_name": "Sam"}
        first = await client.post("/api/cars", json=payload, headers=bearer(user_token))
        second = await client.post("/api/cars", json=payload, headers=bearer(user_token))

        assert first.status_code == 201
        assert first.json()["plate"] == "AB12CD"
        assert second.status_code == 409

    @pytest.mark.asyncio
    async def test_unknown_session(self, client, user_token):
        response = await client.get(
            "/api/parking-sessions/00000000-0000-0000-0000-000000000000",
            headers=bearer(user_token),
        )
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_malformed_session_id(self, client, user_token):
        response = await client.get("/api/parking-sessions/not-a-uuid", headers=bearer(user_token))

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "session_id"


class TestParkingFlow:

    @pytest.mark.asyncio
    async def test_register_enter_exit_report(self, client, db_session):
        await auth_service.ensure_admin(db_session, ADMIN_EMAIL, ADMIN_PASSWORD)
        await db_session.commit()
        login = await client.post(
            "/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
        )
        admin = bearer(login.json()["access_token"])
        driver = bearer(await register_and_login(client))

        lot = await client.post(
            "/api/parking-lots",
            json={"name": "Central", "location": "Main Square", "capacity": 1, "hourly_rate": "2.50"},
            headers=admin,
        )
        assert lot.status_code == 201
        lot_id = lot.json()["id"]

        car = await client.post(
            "/api/cars", json={"plate": "PK-001", "owner_name": "Dana Driver"}, headers=driver
        )
        assert car.status_code == 201
        other = await client.post(
            "/api/cars", json={"plate": "PK-002", "owner_name": "Lee Driver"}, headers=driver
        )
        assert other.status_code == 201

        entry = await client.post(
            "/api/parking-sessions/entry",
            json={"plate": "pk001", "parking_lot_id": lot_id},
            headers=driver,
        )
        assert entry.status_code == 201
        session_id = entry.json()["id"]
        assert entry.json()["is_active"] is True

        again = await client.post(
            "/api/parking-sessions/entry",
            json={"plate": "PK001", "parking_lot_id": lot_id},
            headers=driver,
        )
        assert again.status_code == 409

        full = await client.post(
            "/api/parking-sessions/entry",
            json={"plate": "PK002", "parking_lot_id": lot_id},
            headers=driver,
        )
        assert full.status_code == 409

        occupancy = await client.get("/api/reports/occupancy", headers=admin)
        assert occupancy.json()["lots"][0]["occupied"] == 1

        exit_response = await client.post(f"/api/parking-sessions/{session_id}/exit", headers=driver)
        assert exit_response.status_code == 200
        closed = exit_response.json()
        assert closed["is_active"] is False
        # Under a minute parked still bills one full hour
        assert closed["fee"] == "2.50"

        second_exit = await client.post(f"/api/parking-sessions/{session_id}/exit", headers=driver)
        assert second_exit.status_code == 409

        day = closed["exit_time"][:10]
        revenue = await client.get(
            f"/api/reports/revenue?startDate={day}&endDate={day}&groupBy=parking", headers=admin
        )
        assert revenue.status_code == 200
        body = revenue.json()
        assert body["total_revenue"] == "2.50"
        assert body["groups"][0]["parking_lot_id"] == lot_id


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
