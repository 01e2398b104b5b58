"""UTC datetime utilities."""

import math
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def from_epoch(seconds: float) -> datetime:
    """Epoch seconds -> timezone-aware UTC datetime."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def ceil_seconds(seconds: float) -> int:
    """Round a duration up to whole seconds, never below zero."""
    return max(0, math.ceil(seconds))
