"""CORS for the public calculator API only.

The calculator is embedded on third-party sites, so it answers cross-origin
requests; nothing else in the app does. Allowed origins come from
CALCULATOR_ALLOWED_ORIGINS (comma-separated, "*" = any).

Every /api/calculator response gets CORS headers, including 429s and
errors. OPTIONS preflights are answered here: 204, or 403 for an origin
outside the allow list.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from config.settings import settings

CALCULATOR_PREFIX = "/api/calculator"


def allowed_origins() -> list[str]:
    return [o.strip() for o in settings.CALCULATOR_ALLOWED_ORIGINS.split(",") if o.strip()]


def is_origin_allowed(origin: str | None, allowed: list[str]) -> bool:
    # No Origin header: server-to-server call
    if not origin:
        return True
    return "*" in allowed or origin in allowed


def cors_headers(origin: str | None, allowed: list[str]) -> dict[str, str]:
    if is_origin_allowed(origin, allowed):
        allow_origin = origin or "*"
    else:
        allow_origin = allowed[0] if allowed else "*"
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
        "Access-Control-Max-Age": "86400",
    }


def cache_headers(max_age: int = 300) -> dict[str, str]:
    """Reference data: fresh for max_age, served stale for 12x while revalidating."""
    return {"Cache-Control": f"public, s-maxage={max_age}, stale-while-revalidate={max_age * 12}"}


class CalculatorCorsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not request.url.path.startswith(CALCULATOR_PREFIX):
            return await call_next(request)

        origin = request.headers.get("origin")
        allowed = allowed_origins()

        if request.method == "OPTIONS":
            if not is_origin_allowed(origin, allowed):
                return Response(status_code=403)
            return Response(status_code=204, headers=cors_headers(origin, allowed))

        response = await call_next(request)
        response.headers.update(cors_headers(origin, allowed))
        return response
