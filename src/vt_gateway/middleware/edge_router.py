"""Edge request router: one interception point in front of every route.

For each request (static assets excluded):
  1. CSRF origin check on state-changing methods → 403 (not for the
     calculator API, which carries no session and is called cross-origin)
  2. Decode the session token (cookie or Bearer); an invalid token counts
     as anonymous
  3. Apply the routing table below → 307 redirect or pass through
  4. Renew the session cookie once it is older than SESSION_UPDATE_AGE_HOURS

Routing table, evaluated top to bottom:
  public   + logged in                   → role home (/admin or /dealer)
  public   + anonymous                   → allow
  private  + anonymous                   → /login?callbackUrl=<path>
  /admin*  + role != ADMIN               → /dealer
  /dealer* + role != DEALER              → /admin
  otherwise                              → allow

The landing page "/" is public but never redirects, and logout is reachable
with any session or none. A blocked session is not treated as logged in:
public routes stay reachable (so the login page can explain the block) and
private routes go to /login?error=blocked.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response

from config.settings import settings
from src.vt_common.enums import UserRole
from src.vt_common.errors import CsrfRejectedError, InvalidSessionTokenError
from src.vt_common.response import error_response
from src.vt_gateway.auth.guards import BLOCKED_LOGIN_PATH, login_redirect
from src.vt_gateway.auth.session import DecodedSession, Session
from src.vt_gateway.auth.session_token import (
    create_session_token,
    decode_session_token,
    needs_renewal,
    read_session_token,
    session_cookie_name,
    set_session_cookie,
)
from src.vt_gateway.middleware.csrf import is_csrf_safe

logger = logging.getLogger("vt.request")

PUBLIC_PREFIXES: tuple[str, ...] = (
    "/login",
    "/forgot-password",
    "/reset-password",
    "/api/auth",
    "/api/calculator",
    "/api/health",
)

CSRF_EXEMPT_PREFIXES: tuple[str, ...] = ("/api/calculator",)

LOGOUT_PATH = "/api/session/logout"

_STATIC_PATH = re.compile(
    r"^/(static/|favicon\.ico$)|\.(svg|png|jpg|jpeg|gif|webp)$", re.IGNORECASE
)


class RouteClass(str, Enum):
    STATIC = "STATIC"
    LANDING = "LANDING"
    LOGOUT = "LOGOUT"
    PUBLIC = "PUBLIC"
    ADMIN = "ADMIN"
    DEALER = "DEALER"
    PROTECTED = "PROTECTED"


@dataclass(frozen=True)
class RouteDecision:
    redirect_to: str | None = None

    @property
    def allowed(self) -> bool:
        return self.redirect_to is None


ALLOW = RouteDecision()


def classify_path(path: str) -> RouteClass:
    if _STATIC_PATH.search(path):
        return RouteClass.STATIC
    if path == "/":
        return RouteClass.LANDING
    if path == LOGOUT_PATH:
        return RouteClass.LOGOUT
    if any(path.startswith(prefix) for prefix in PUBLIC_PREFIXES):
        return RouteClass.PUBLIC
    if path.startswith("/admin"):
        return RouteClass.ADMIN
    if path.startswith("/dealer"):
        return RouteClass.DEALER
    return RouteClass.PROTECTED


def route_request(path: str, session: Session | None) -> RouteDecision:
    route = classify_path(path)
    if route in (RouteClass.STATIC, RouteClass.LANDING, RouteClass.LOGOUT):
        return ALLOW

    logged_in = session is not None and not session.is_blocked

    if route == RouteClass.PUBLIC:
        if logged_in:
            return RouteDecision(session.home)  # type: ignore[union-attr]
        return ALLOW

    if session is None:
        return RouteDecision(login_redirect(path))
    if session.is_blocked:
        return RouteDecision(BLOCKED_LOGIN_PATH)

    if route == RouteClass.ADMIN and session.role != UserRole.ADMIN:
        return RouteDecision("/dealer")
    if route == RouteClass.DEALER and session.role != UserRole.DEALER:
        return RouteDecision("/admin")
    return ALLOW


def _decode(request: Request) -> DecodedSession | None:
    token = read_session_token(request)
    if token is None:
        return None
    try:
        return decode_session_token(token)
    except InvalidSessionTokenError:
        return None


class EdgeRouterMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if classify_path(path) == RouteClass.STATIC:
            return await call_next(request)

        if not path.startswith(CSRF_EXEMPT_PREFIXES) and not is_csrf_safe(
            request.method,
            request.headers.get("origin"),
            request.headers.get("host"),
            allow_localhost=not settings.is_production,
        ):
            logger.warning("csrf rejected %s %s", request.method, path)
            exc = CsrfRejectedError()
            return JSONResponse(
                status_code=exc.http_status,
                content=error_response(exc.code, exc.message).model_dump(),
            )

        decoded = _decode(request)
        session = decoded.session if decoded else None
        request.state.session = session

        decision = route_request(path, session)
        if not decision.allowed:
            return RedirectResponse(decision.redirect_to, status_code=307)  # type: ignore[arg-type]

        response = await call_next(request)

        # Sliding expiry: refresh the cookie at most once per update window,
        # unless the handler already set or cleared it (login, logout)
        if (
            decoded is not None
            and not decoded.session.is_blocked
            and needs_renewal(decoded)
            and not _touches_session_cookie(response)
        ):
            set_session_cookie(response, create_session_token(decoded.session))
        return response


def _touches_session_cookie(response: Response) -> bool:
    prefix = f"{session_cookie_name()}="
    return any(
        header.startswith(prefix) for header in response.headers.getlist("set-cookie")
    )
