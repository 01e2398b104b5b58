"""Unit tests for the edge request router: routing table and middleware."""

from datetime import UTC, datetime, timedelta

import pytest
from httpx import AsyncClient

from src.vt_common.enums import UserRole, UserStatus
from src.vt_gateway.auth.session_token import create_session_token
from src.vt_gateway.middleware.edge_router import (
    ALLOW,
    RouteClass,
    RouteDecision,
    classify_path,
    route_request,
)
from tests.helpers import make_session, session_cookie_header

ADMIN = make_session(role=UserRole.ADMIN)
DEALER = make_session(role=UserRole.DEALER)
BLOCKED_DEALER = make_session(role=UserRole.DEALER, status=UserStatus.BLOCKED)


class TestClassifyPath:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/", RouteClass.LANDING),
            ("/login", RouteClass.PUBLIC),
            ("/forgot-password", RouteClass.PUBLIC),
            ("/reset-password", RouteClass.PUBLIC),
            ("/api/auth/login", RouteClass.PUBLIC),
            ("/api/calculator/countries", RouteClass.PUBLIC),
            ("/api/health", RouteClass.PUBLIC),
            ("/admin", RouteClass.ADMIN),
            ("/admin/dealers/42", RouteClass.ADMIN),
            ("/dealer/vehicles", RouteClass.DEALER),
            ("/api/session", RouteClass.PROTECTED),
            ("/api/session/logout", RouteClass.LOGOUT),
            ("/settings", RouteClass.PROTECTED),
            ("/static/app.js", RouteClass.STATIC),
            ("/favicon.ico", RouteClass.STATIC),
            ("/images/logo.SVG", RouteClass.STATIC),
            ("/admin/photo.webp", RouteClass.STATIC),
        ],
    )
    def test_classification(self, path: str, expected: RouteClass) -> None:
        assert classify_path(path) == expected


class TestRouteRequest:
    def test_dealer_on_admin_path(self) -> None:
        assert route_request("/admin/x", DEALER) == RouteDecision("/dealer")

    def test_admin_on_dealer_path(self) -> None:
        assert route_request("/dealer/x", ADMIN) == RouteDecision("/admin")

    def test_anonymous_on_admin_path(self) -> None:
        assert route_request("/admin/x", None) == RouteDecision("/login?callbackUrl=%2Fadmin%2Fx")

    def test_logged_in_admin_on_login(self) -> None:
        assert route_request("/login", ADMIN) == RouteDecision("/admin")

    def test_logged_in_dealer_on_public_api(self) -> None:
        assert route_request("/api/calculator/countries", DEALER) == RouteDecision("/dealer")

    def test_anonymous_on_public(self) -> None:
        assert route_request("/forgot-password", None) == ALLOW

    def test_own_area_allowed(self) -> None:
        assert route_request("/admin/dealers", ADMIN) == ALLOW
        assert route_request("/dealer/vehicles", DEALER) == ALLOW

    def test_other_private_path_any_role(self) -> None:
        assert route_request("/api/session", DEALER) == ALLOW
        assert route_request("/api/session", ADMIN) == ALLOW

    def test_landing_never_redirects(self) -> None:
        assert route_request("/", None) == ALLOW
        assert route_request("/", ADMIN) == ALLOW

    def test_static_never_redirects(self) -> None:
        assert route_request("/static/app.css", None) == ALLOW

    def test_blocked_session_can_see_public_pages(self) -> None:
        assert route_request("/login", BLOCKED_DEALER) == ALLOW

    def test_blocked_session_on_private_path(self) -> None:
        assert route_request("/dealer", BLOCKED_DEALER) == RouteDecision("/login?error=blocked")

    def test_logout_reachable_by_any_session(self) -> None:
        assert route_request("/api/session/logout", BLOCKED_DEALER) == ALLOW
        assert route_request("/api/session/logout", ADMIN) == ALLOW
        assert route_request("/api/session/logout", None) == ALLOW


class TestEdgeRouterMiddleware:
    async def test_anonymous_redirected_to_login(self, client: AsyncClient) -> None:
        resp = await client.get("/admin/dealers")
        assert resp.status_code == 307
        assert resp.headers["location"] == "/login?callbackUrl=%2Fadmin%2Fdealers"

    async def test_wrong_role_redirected_home(self, client: AsyncClient) -> None:
        resp = await client.get("/admin/dealers", headers=session_cookie_header(DEALER))
        assert resp.status_code == 307
        assert resp.headers["location"] == "/dealer"

    async def test_logged_in_user_leaves_login_page(self, client: AsyncClient) -> None:
        resp = await client.get("/login", headers=session_cookie_header(ADMIN))
        assert resp.status_code == 307
        assert resp.headers["location"] == "/admin"

    async def test_own_area_served(self, client: AsyncClient) -> None:
        resp = await client.get("/admin", headers=session_cookie_header(ADMIN))
        assert resp.status_code == 200
        body = resp.json()
        assert body["data"]["area"] == "admin"
        assert body["data"]["user"]["role"] == "ADMIN"

    async def test_bearer_token_accepted(self, client: AsyncClient) -> None:
        token = create_session_token(DEALER)
        resp = await client.get("/dealer", headers={"authorization": f"Bearer {token}"})
        assert resp.status_code == 200
        assert resp.json()["data"]["area"] == "dealer"

    async def test_invalid_token_is_anonymous(self, client: AsyncClient) -> None:
        resp = await client.get("/dealer", headers=session_cookie_header(DEALER, token="garbage"))
        assert resp.status_code == 307
        assert resp.headers["location"] == "/login?callbackUrl=%2Fdealer"

    async def test_blocked_session(self, client: AsyncClient) -> None:
        resp = await client.get("/dealer", headers=session_cookie_header(BLOCKED_DEALER))
        assert resp.status_code == 307
        assert resp.headers["location"] == "/login?error=blocked"

        page = await client.get("/login?error=blocked", headers=session_cookie_header(BLOCKED_DEALER))
        assert page.status_code == 200
        assert "blocked" in page.json()["message"]

    async def test_blocked_session_can_log_out(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/session/logout", headers=session_cookie_header(BLOCKED_DEALER)
        )
        assert resp.status_code == 200
        cookies = resp.headers.get_list("set-cookie")
        assert any(c.startswith("vt.session-token=") and "Max-Age=0" in c for c in cookies)

    async def test_landing_page_public(self, client: AsyncClient) -> None:
        resp = await client.get("/", headers=session_cookie_header(ADMIN))
        assert resp.status_code == 200

    async def test_static_paths_skip_routing(self, client: AsyncClient) -> None:
        resp = await client.get("/static/logo.png")
        assert resp.status_code == 404

    async def test_cross_origin_post_rejected(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "x"},
            headers={"origin": "https://evil.example"},
        )
        assert resp.status_code == 403
        assert resp.json()["code"] == 9002


class TestSessionRenewal:
    async def test_fresh_token_not_reissued(self, client: AsyncClient) -> None:
        resp = await client.get("/dealer", headers=session_cookie_header(DEALER))
        assert resp.status_code == 200
        assert "set-cookie" not in resp.headers

    async def test_day_old_token_reissued(self, client: AsyncClient) -> None:
        old = create_session_token(DEALER, now=datetime.now(UTC) - timedelta(hours=25))
        resp = await client.get("/dealer", headers=session_cookie_header(DEALER, token=old))
        assert resp.status_code == 200
        renewed = resp.headers["set-cookie"]
        assert renewed.startswith("vt.session-token=")
        assert old not in renewed

    async def test_logout_is_not_undone_by_renewal(self, client: AsyncClient) -> None:
        old = create_session_token(DEALER, now=datetime.now(UTC) - timedelta(hours=25))
        resp = await client.post(
            "/api/session/logout", headers=session_cookie_header(DEALER, token=old)
        )
        assert resp.status_code == 200
        cookies = resp.headers.get_list("set-cookie")
        assert cookies
        assert all("Max-Age=0" in c for c in cookies)
