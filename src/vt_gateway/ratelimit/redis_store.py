"""Redis-backed fixed-window rate limiter for multi-instance deployments.

Fixed window with INCR + PEXPIRE:
    count = INCR ratelimit:{key}
    if the key has no TTL yet (first hit of the window): PEXPIRE window_ms
    count > limit → denied, retry after PTTL

Redis expires closed windows itself, so there is no sweep task. When Redis
is unreachable the limiter fails open: a rate limiter outage must not take
login down with it.
"""

import logging
import time
from collections.abc import Callable

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.vt_common.datetime_utils import ceil_seconds, from_epoch
from src.vt_gateway.ratelimit.types import RateLimitConfig, RateLimitResult

logger = logging.getLogger("vt.ratelimit")

_KEY_PREFIX = "ratelimit:"


class RedisRateLimiter:
    def __init__(
        self,
        redis: aioredis.Redis,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._redis = redis
        self._clock = clock

    async def check(self, key: str, config: RateLimitConfig) -> RateLimitResult:
        redis_key = _KEY_PREFIX + key
        window_ms = config.window_seconds * 1000
        now = self._clock()
        try:
            pipe = self._redis.pipeline(transaction=True)
            pipe.incr(redis_key)
            pipe.pttl(redis_key)
            count, ttl_ms = await pipe.execute()
            if ttl_ms < 0:
                await self._redis.pexpire(redis_key, window_ms)
                ttl_ms = window_ms
        except RedisError:
            logger.warning("rate limit check failed open for key=%s", key, exc_info=True)
            return _fail_open(config, now)

        reset_at = now + ttl_ms / 1000
        if count > config.limit:
            return RateLimitResult(
                allowed=False,
                limit=config.limit,
                remaining=0,
                reset_at=from_epoch(reset_at),
                retry_after_seconds=ceil_seconds(ttl_ms / 1000),
            )
        return RateLimitResult(
            allowed=True,
            limit=config.limit,
            remaining=config.limit - count,
            reset_at=from_epoch(reset_at),
        )

    async def status(self, key: str, config: RateLimitConfig) -> RateLimitResult:
        redis_key = _KEY_PREFIX + key
        now = self._clock()
        try:
            pipe = self._redis.pipeline(transaction=True)
            pipe.get(redis_key)
            pipe.pttl(redis_key)
            raw_count, ttl_ms = await pipe.execute()
        except RedisError:
            logger.warning("rate limit status failed open for key=%s", key, exc_info=True)
            return _fail_open(config, now)

        if raw_count is None or ttl_ms <= 0:
            return _fail_open(config, now)

        remaining = max(0, config.limit - int(raw_count))
        allowed = remaining > 0
        return RateLimitResult(
            allowed=allowed,
            limit=config.limit,
            remaining=remaining,
            reset_at=from_epoch(now + ttl_ms / 1000),
            retry_after_seconds=None if allowed else ceil_seconds(ttl_ms / 1000),
        )

    async def reset(self, key: str) -> None:
        try:
            await self._redis.delete(_KEY_PREFIX + key)
        except RedisError:
            logger.warning("rate limit reset failed for key=%s", key, exc_info=True)

    async def start(self) -> None:
        return None

    async def close(self) -> None:
        return None


def _fail_open(config: RateLimitConfig, now: float) -> RateLimitResult:
    """Untouched-window result: used for unknown keys and for Redis outages."""
    return RateLimitResult(
        allowed=True,
        limit=config.limit,
        remaining=config.limit,
        reset_at=from_epoch(now + config.window_seconds),
    )
