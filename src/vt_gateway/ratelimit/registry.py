"""Process-wide rate limiter: created lazily on first use, closed on shutdown.

RATE_LIMIT_BACKEND selects the implementation:
  - "memory": InMemoryRateLimiter (default)
  - "redis":  RedisRateLimiter on the shared Redis pool
"""

import logging

from config.settings import settings
from src.vt_common.redis_client import close_redis, get_redis
from src.vt_gateway.ratelimit.memory import InMemoryRateLimiter
from src.vt_gateway.ratelimit.redis_store import RedisRateLimiter
from src.vt_gateway.ratelimit.types import RateLimiter

logger = logging.getLogger("vt.ratelimit")

_limiter: RateLimiter | None = None


async def get_rate_limiter() -> RateLimiter:
    """Get or create the limiter. Also usable as a FastAPI dependency."""
    global _limiter  # noqa: PLW0603
    if _limiter is None:
        if settings.RATE_LIMIT_BACKEND == "redis":
            _limiter = RedisRateLimiter(await get_redis())
        elif settings.RATE_LIMIT_BACKEND == "memory":
            _limiter = InMemoryRateLimiter(
                sweep_interval_seconds=settings.RATE_LIMIT_SWEEP_SECONDS
            )
        else:
            raise ValueError(f"Unknown RATE_LIMIT_BACKEND: {settings.RATE_LIMIT_BACKEND}")
        await _limiter.start()
        logger.info("rate limiter started backend=%s", settings.RATE_LIMIT_BACKEND)
    return _limiter


async def close_rate_limiter() -> None:
    global _limiter  # noqa: PLW0603
    if _limiter is not None:
        await _limiter.close()
        _limiter = None
        if settings.RATE_LIMIT_BACKEND == "redis":
            await close_redis()
