"""
Parking API — Report Endpoint Tests
====================================

What:  The admin report routes over HTTP: the authenticate → authorize →
       validate chain, response shapes, and the generic 500.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from parking_api.exceptions import PersistenceError
from parking_api.security import create_access_token
from parking_api.services.report_service import report_service

REPORT_URLS = [
    "/api/reports/outgoing?startDate=2024-03-01&endDate=2024-03-02",
    "/api/reports/incoming?startDate=2024-03-01&endDate=2024-03-02",
    "/api/reports/occupancy",
    "/api/reports/revenue?startDate=2024-03-01&endDate=2024-03-02",
]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestAuthentication:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", REPORT_URLS)
    async def test_missing_token(self, client, url):
        response = await client.get(url)

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        body = response.json()
        assert body["error"] == "authentication_error"
        assert body["message"] == "Missing bearer token"

    @pytest.mark.asyncio
    async def test_garbage_token(self, client):
        response = await client.get("/api/reports/occupancy", headers=bearer("garbage"))

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid authentication token"

    @pytest.mark.asyncio
    async def test_expired_token(self, client):
        token = create_access_token(
            subject=str(uuid4()), role="admin", expires_delta=timedelta(minutes=-1)
        )
        response = await client.get("/api/reports/occupancy", headers=bearer(token))

        assert response.status_code == 401
        assert response.json()["message"] == "Token has expired"

    @pytest.mark.asyncio
    async def test_non_bearer_scheme(self, client, admin_token):
        response = await client.get(
            "/api/reports/occupancy", headers={"Authorization": f"Basic {admin_token}"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_auth_checked_before_query(self, client):
        response = await client.get("/api/reports/revenue?groupBy=week")

        assert response.status_code == 401


class TestAuthorization:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", REPORT_URLS)
    async def test_user_role_forbidden(self, client, user_token, url):
        response = await client.get(url, headers=bearer(user_token))

        assert response.status_code == 403
        assert response.json()["error"] == "authorization_error"

    @pytest.mark.asyncio
    async def test_role_checked_before_query(self, client, user_token):
        response = await client.get("/api/reports/outgoing", headers=bearer(user_token))

        assert response.status_code == 403


class TestQueryValidation:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["outgoing", "incoming", "revenue"])
    async def test_missing_dates_lists_both(self, client, admin_token, path):
        response = await client.get(f"/api/reports/{path}", headers=bearer(admin_token))

        assert response.status_code == 400
        body = response.json()
        assert {"field": "startDate", "message": "Start date is required"} in body["errors"]
        assert {"field": "endDate", "message": "End date is required"} in body["errors"]
        assert "request_id" in body

    @pytest.mark.asyncio
    async def test_fields_use_query_names(self, client, admin_token):
        response = await client.get(
            "/api/reports/outgoing?startDate=yesterday", headers=bearer(admin_token)
        )

        assert response.status_code == 400
        assert [e["field"] for e in response.json()["errors"]] == ["startDate", "endDate"]

    @pytest.mark.asyncio
    async def test_invalid_group_by(self, client, admin_token):
        response = await client.get(
            "/api/reports/revenue?startDate=2024-03-01&endDate=2024-03-02&groupBy=week",
            headers=bearer(admin_token),
        )

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {"field": "groupBy", "message": "Group by must be either parking or day"}
        ]

    @pytest.mark.asyncio
    async def test_reversed_range(self, client, admin_token):
        response = await client.get(
            "/api/reports/incoming?startDate=2024-03-05&endDate=2024-03-01",
            headers=bearer(admin_token),
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["message"] == "End date must not be before start date"


class TestReportBodies:

    @pytest.mark.asyncio
    async def test_occupancy(self, client, admin_token, make_lot, make_car, make_session):
        lot = await make_lot(capacity=4)
        await make_session(await make_car(), lot, entry_time=datetime(2024, 3, 1, 8, tzinfo=timezone.utc))

        response = await client.get("/api/reports/occupancy", headers=bearer(admin_token))

        assert response.status_code == 200
        body = response.json()
        assert body["total_capacity"] == 4
        assert body["total_occupied"] == 1
        assert body["lots"][0]["parking_lot_id"] == str(lot.id)
        assert body["lots"][0]["available"] == 3

    @pytest.mark.asyncio
    async def test_outgoing_echoes_range(self, client, admin_token):
        response = await client.get(
            "/api/reports/outgoing?startDate=2024-03-01&endDate=2024-03-01",
            headers=bearer(admin_token),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 0
        assert body["start_date"].startswith("2024-03-01T00:00:00")
        assert body["end_date"].startswith("2024-03-01T23:59:59")

    @pytest.mark.asyncio
    async def test_revenue_grouped(self, client, admin_token):
        response = await client.get(
            "/api/reports/revenue?startDate=2024-03-01&endDate=2024-03-31&groupBy=parking",
            headers=bearer(admin_token),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["group_by"] == "parking"
        assert body["total_revenue"] == "0.00"
        assert body["groups"] == []

    @pytest.mark.asyncio
    async def test_revenue_amounts_are_exact(self, client, admin_token, make_lot, make_car, make_session):
        lot = await make_lot()
        await make_session(
            await make_car(), lot,
            entry_time=datetime(2024, 3, 1, 8, tzinfo=timezone.utc),
            exit_time=datetime(2024, 3, 1, 9, tzinfo=timezone.utc),
            fee="0.10",
        )
        await make_session(
            await make_car(), lot,
            entry_time=datetime(2024, 3, 2, 8, tzinfo=timezone.utc),
            exit_time=datetime(2024, 3, 2, 9, tzinfo=timezone.utc),
            fee="0.20",
        )

        response = await client.get(
            "/api/reports/revenue?startDate=2024-03-01&endDate=2024-03-02&groupBy=day",
            headers=bearer(admin_token),
        )

        body = response.json()
        assert body["total_revenue"] == "0.30"
        assert [g["revenue"] for g in body["groups"]] == ["0.10", "0.20"]
        assert sum(Decimal(g["revenue"]) for g in body["groups"]) == Decimal(body["total_revenue"])


class TestServerErrors:

    @pytest.mark.asyncio
    async def test_persistence_error_is_generic(self, client, admin_token):
        failing = AsyncMock(side_effect=PersistenceError(context={"error_type": "OperationalError"}))
        with patch.object(report_service, "get_occupancy", failing):
            response = await client.get("/api/reports/occupancy", headers=bearer(admin_token))

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "An internal error occurred. Please try again later."
        assert "OperationalError" not in response.text


class TestResponseHeaders:

    @pytest.mark.asyncio
    async def test_request_id_generated(self, client):
        response = await client.get("/api/reports/occupancy")

        assert response.headers.get("x-request-id")
        assert response.json()["request_id"] == response.headers["x-request-id"]

    @pytest.mark.asyncio
    async def test_request_id_propagated(self, client):
        response = await client.get("/api/reports/occupancy", headers={"X-Request-ID": "trace-42"})

        assert response.headers["x-request-id"] == "trace-42"

    @pytest.mark.asyncio
    async def test_security_headers(self, client):
        response = await client.get("/api/reports/occupancy")

        assert response.headers["x-content-type-options"] == "nosniff"
        assert "x-frame-options" in response.headers
