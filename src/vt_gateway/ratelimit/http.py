"""HTTP glue for the rate limiter: client IP, response headers, FastAPI dependency.

Usage in a public router:
    from src.vt_gateway.ratelimit.http import RateLimitGuard

    @router.get("/countries", dependencies=[Depends(RateLimitGuard("calculator"))])
    async def countries(...): ...

Allowed requests get X-RateLimit-* headers on the response. Denied requests
raise RateLimitedError → HTTP 429 with the same headers plus Retry-After.
"""

import math
from collections.abc import Mapping
from typing import Annotated

from fastapi import Depends, Request, Response

from src.vt_common.errors import RateLimitedError
from src.vt_gateway.ratelimit.config import RATE_LIMITS
from src.vt_gateway.ratelimit.registry import get_rate_limiter
from src.vt_gateway.ratelimit.types import RateLimiter, RateLimitResult

ANONYMOUS_CLIENT = "anonymous"


def client_ip_from_headers(headers: Mapping[str, str]) -> str:
    """First X-Forwarded-For hop, else X-Real-IP, else the shared "anonymous" bucket.

    Clients behind no proxy headers all share one bucket.
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return ANONYMOUS_CLIENT


def get_client_ip(request: Request) -> str:
    return client_ip_from_headers(request.headers)


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    return {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(math.ceil(result.reset_at.timestamp())),
    }


class RateLimitGuard:
    """Per-IP rate limit dependency for one named bucket."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.config = RATE_LIMITS[name]

    async def __call__(
        self,
        request: Request,
        response: Response,
        limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
    ) -> RateLimitResult:
        key = f"{self.name}:{get_client_ip(request)}"
        result = await limiter.check(key, self.config)
        headers = rate_limit_headers(result)
        if not result.allowed:
            raise RateLimitedError(result.retry_after_seconds or 1, headers=headers)
        response.headers.update(headers)
        return result
