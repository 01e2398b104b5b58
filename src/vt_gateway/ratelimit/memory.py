"""In-memory fixed-window rate limiter.

State lives in a plain dict owned by the event loop thread. None of the
public coroutines await anything, so a check-and-increment for one key
cannot interleave with another request's. Counters are lost on restart and
are not shared between processes; use RedisRateLimiter when that matters.

Expired entries are removed by a background sweep task whose interval is
independent of any key's window.
"""

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable

from src.vt_common.datetime_utils import ceil_seconds, from_epoch
from src.vt_gateway.ratelimit.types import RateLimitConfig, RateLimitEntry, RateLimitResult

logger = logging.getLogger("vt.ratelimit")


class InMemoryRateLimiter:
    def __init__(
        self,
        sweep_interval_seconds: float = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._entries: dict[str, RateLimitEntry] = {}
        self._sweep_interval = sweep_interval_seconds
        self._clock = clock
        self._sweep_task: asyncio.Task[None] | None = None

    def __len__(self) -> int:
        return len(self._entries)

    async def check(self, key: str, config: RateLimitConfig) -> RateLimitResult:
        now = self._clock()
        entry = self._entries.get(key)

        # New key or closed window: replace, never merge
        if entry is None or now >= entry.reset_at:
            entry = RateLimitEntry(count=1, reset_at=now + config.window_seconds)
            self._entries[key] = entry
            return RateLimitResult(
                allowed=True,
                limit=config.limit,
                remaining=config.limit - 1,
                reset_at=from_epoch(entry.reset_at),
            )

        entry.count += 1
        if entry.count > config.limit:
            return RateLimitResult(
                allowed=False,
                limit=config.limit,
                remaining=0,
                reset_at=from_epoch(entry.reset_at),
                retry_after_seconds=ceil_seconds(entry.reset_at - now),
            )

        return RateLimitResult(
            allowed=True,
            limit=config.limit,
            remaining=config.limit - entry.count,
            reset_at=from_epoch(entry.reset_at),
        )

    async def status(self, key: str, config: RateLimitConfig) -> RateLimitResult:
        now = self._clock()
        entry = self._entries.get(key)

        if entry is None or now >= entry.reset_at:
            return RateLimitResult(
                allowed=True,
                limit=config.limit,
                remaining=config.limit,
                reset_at=from_epoch(now + config.window_seconds),
            )

        remaining = max(0, config.limit - entry.count)
        allowed = remaining > 0
        return RateLimitResult(
            allowed=allowed,
            limit=config.limit,
            remaining=remaining,
            reset_at=from_epoch(entry.reset_at),
            retry_after_seconds=None if allowed else ceil_seconds(entry.reset_at - now),
        )

    async def reset(self, key: str) -> None:
        self._entries.pop(key, None)

    def sweep(self) -> int:
        """Drop every entry whose window has closed. Returns how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now >= entry.reset_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("rate limit sweep removed %d expired entries", len(expired))
        return len(expired)

    async def start(self) -> None:
        if self._sweep_task is None:
            self._sweep_task = asyncio.create_task(self._sweep_loop())

    async def close(self) -> None:
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._sweep_task
            self._sweep_task = None
        self._entries.clear()

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            self.sweep()
