"""HTTP tests for the public calculator API: rate limits, CORS, error envelope."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from src.main import app
from src.vt_calculator.api import router as calculator_router
from src.vt_calculator.application.service import CalculatorService
from src.vt_common.database import get_db_session
from tests.helpers import make_price_repo

CALCULATE_BODY = {
    "city_id": "city-1",
    "origin_port_id": "p-nyc",
    "destination_port_id": "p-pti",
    "vehicle_value": 15000,
}


async def _fake_db() -> AsyncGenerator[AsyncMock, None]:
    yield AsyncMock()


@pytest.fixture(autouse=True)
def fake_calculator(monkeypatch: pytest.MonkeyPatch) -> None:
    app.dependency_overrides[get_db_session] = _fake_db
    monkeypatch.setattr(calculator_router, "_service", CalculatorService(make_price_repo()))


class TestReferenceEndpoints:
    async def test_countries(self, client: AsyncClient) -> None:
        resp = await client.get("/api/calculator/countries")
        assert resp.status_code == 200
        assert resp.json()["data"]["countries"][0]["code"] == "US"
        assert resp.headers["X-RateLimit-Limit"] == "100"
        assert resp.headers["X-RateLimit-Remaining"] == "99"
        assert "stale-while-revalidate" in resp.headers["Cache-Control"]

    async def test_ports_share_the_reference_bucket(self, client: AsyncClient) -> None:
        await client.get("/api/calculator/countries")
        resp = await client.get("/api/calculator/ports", params={"country_id": "c-us"})
        assert resp.status_code == 200
        assert resp.headers["X-RateLimit-Remaining"] == "98"


class TestStatesAndCities:
    async def test_states(self, client: AsyncClient) -> None:
        resp = await client.get("/api/calculator/states", params={"country_id": "c-us"})
        assert resp.status_code == 200
        assert resp.json()["data"]["states"] == [{"id": "s-ny", "code": "NY", "name": "New York"}]
        assert resp.headers["X-RateLimit-Limit"] == "100"
        assert "s-maxage=300" in resp.headers["Cache-Control"]

    async def test_states_without_country(self, client: AsyncClient) -> None:
        resp = await client.get("/api/calculator/states")
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == 3002
        assert body["message"] == "Missing required parameter: country_id"

    async def test_states_of_unknown_country(
        self, client: AsyncClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        repo = make_price_repo()
        repo.country_exists.return_value = False
        monkeypatch.setattr(calculator_router, "_service", CalculatorService(repo))
        resp = await client.get("/api/calculator/states", params={"country_id": "c-xx"})
        assert resp.status_code == 404
        assert resp.json()["code"] == 3003

    async def test_cities(self, client: AsyncClient) -> None:
        resp = await client.get("/api/calculator/cities", params={"state_id": "s-ny"})
        assert resp.status_code == 200
        assert resp.json()["data"]["cities"] == [{"id": "city-1", "name": "Albany"}]
        assert "Cache-Control" in resp.headers

    async def test_cities_without_state(self, client: AsyncClient) -> None:
        resp = await client.get("/api/calculator/cities")
        assert resp.status_code == 400

    async def test_cities_of_unknown_state(
        self, client: AsyncClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        repo = make_price_repo()
        repo.state_exists.return_value = False
        monkeypatch.setattr(calculator_router, "_service", CalculatorService(repo))
        resp = await client.get(
            "/api/calculator/cities",
            params={"state_id": "s-xx"},
            headers={"origin": "https://dealer-site.example"},
        )
        assert resp.status_code == 404
        assert resp.json()["message"] == "State not found"
        assert resp.headers["Access-Control-Allow-Origin"] == "https://dealer-site.example"

    async def test_cities_count_against_reference_bucket(self, client: AsyncClient) -> None:
        await client.get("/api/calculator/states", params={"country_id": "c-us"})
        resp = await client.get("/api/calculator/cities", params={"state_id": "s-ny"})
        assert resp.headers["X-RateLimit-Remaining"] == "98"


class TestPortFilters:
    async def test_destination_ports(self, client: AsyncClient) -> None:
        resp = await client.get("/api/calculator/ports", params={"type": "destination"})
        assert resp.status_code == 200
        ports = resp.json()["data"]["ports"]
        assert [p["id"] for p in ports] == ["p-pti"]
        assert ports[0]["is_destination"] is True

    async def test_origin_ports_of_state(self, client: AsyncClient) -> None:
        resp = await client.get("/api/calculator/ports", params={"state_id": "s-ny"})
        assert resp.status_code == 200
        assert resp.json()["data"]["ports"][0]["state_id"] == "s-ny"

    async def test_origin_type_without_state(self, client: AsyncClient) -> None:
        resp = await client.get("/api/calculator/ports", params={"type": "origin"})
        assert resp.status_code == 400

    async def test_unknown_type_rejected(self, client: AsyncClient) -> None:
        resp = await client.get("/api/calculator/ports", params={"type": "inland"})
        assert resp.status_code == 422


class TestCalculate:
    async def test_quote(self, client: AsyncClient) -> None:
        resp = await client.post("/api/calculator/calculate", json=CALCULATE_BODY)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["total"] == 1800.0
        assert data["currency"] == "USD"
        assert resp.headers["X-RateLimit-Limit"] == "50"

    async def test_non_positive_vehicle_value_rejected(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/calculator/calculate", json={**CALCULATE_BODY, "vehicle_value": 0}
        )
        assert resp.status_code == 422

    async def test_missing_price_returns_details(
        self, client: AsyncClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            calculator_router, "_service", CalculatorService(make_price_repo(towing=None))
        )
        resp = await client.post("/api/calculator/calculate", json=CALCULATE_BODY)
        assert resp.status_code == 422
        body = resp.json()
        assert body["code"] == 3001
        assert len(body["data"]["details"]) == 1

    async def test_51st_call_in_a_minute_is_limited(self, client: AsyncClient) -> None:
        headers = {"x-forwarded-for": "203.0.113.50", "origin": "https://dealer-site.example"}
        for _ in range(50):
            resp = await client.post("/api/calculator/calculate", json=CALCULATE_BODY, headers=headers)
            assert resp.status_code == 200

        resp = await client.post("/api/calculator/calculate", json=CALCULATE_BODY, headers=headers)
        assert resp.status_code == 429
        body = resp.json()
        assert body["code"] == 9001
        assert body["data"]["retry_after_seconds"] > 0
        assert resp.headers["X-RateLimit-Remaining"] == "0"
        assert "Retry-After" in resp.headers
        # Throttled embeds still get CORS headers
        assert resp.headers["Access-Control-Allow-Origin"] == "https://dealer-site.example"


class TestCors:
    async def test_cross_origin_post_is_not_csrf_rejected(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/calculator/calculate",
            json=CALCULATE_BODY,
            headers={"origin": "https://dealer-site.example"},
        )
        assert resp.status_code == 200
        assert resp.headers["Access-Control-Allow-Origin"] == "https://dealer-site.example"

    async def test_preflight(self, client: AsyncClient) -> None:
        resp = await client.options(
            "/api/calculator/calculate", headers={"origin": "https://dealer-site.example"}
        )
        assert resp.status_code == 204
        assert "POST" in resp.headers["Access-Control-Allow-Methods"]

    async def test_preflight_from_unlisted_origin(
        self, client: AsyncClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "config.settings.settings.CALCULATOR_ALLOWED_ORIGINS", "https://partner.example"
        )
        resp = await client.options(
            "/api/calculator/countries", headers={"origin": "https://evil.example"}
        )
        assert resp.status_code == 403

    async def test_other_routes_get_no_cors_headers(self, client: AsyncClient) -> None:
        resp = await client.get("/login")
        assert "Access-Control-Allow-Origin" not in resp.headers
