"""Rate limiting types and the backend Protocol.

Two backends implement ``RateLimiter``:
  - InMemoryRateLimiter: process memory, one instance only (dev, tests, single box)
  - RedisRateLimiter:    shared counters for horizontally scaled deployments

Callers never handle exceptions from a limiter: every outcome is a
``RateLimitResult``.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class RateLimitConfig:
    limit: int
    window_seconds: int


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_at: datetime
    retry_after_seconds: int | None = None


@dataclass
class RateLimitEntry:
    """One fixed window for one key. ``reset_at`` is epoch seconds."""

    count: int
    reset_at: float


class RateLimiter(Protocol):
    async def check(self, key: str, config: RateLimitConfig) -> RateLimitResult:
        """Count one request against ``key`` and report whether it is allowed."""
        ...

    async def status(self, key: str, config: RateLimitConfig) -> RateLimitResult:
        """Report the current state of ``key`` without counting a request."""
        ...

    async def reset(self, key: str) -> None:
        """Forget ``key`` entirely."""
        ...

    async def start(self) -> None: ...

    async def close(self) -> None: ...
