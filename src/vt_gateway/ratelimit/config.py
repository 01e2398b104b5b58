"""Named rate limit configurations.

The limiter itself knows nothing about these; callers pick one and build
the key:
  - login:                5 / 5 min   key "login:{email}"
  - password_reset:       3 / hour    key "password-reset:{email}"
  - calculator:           100 / min   key = client IP (reference data lookups)
  - calculator_calculate: 50 / min    key = client IP (price calculation)
"""

from src.vt_gateway.ratelimit.types import RateLimitConfig

RATE_LIMITS: dict[str, RateLimitConfig] = {
    "login": RateLimitConfig(limit=5, window_seconds=5 * 60),
    "password_reset": RateLimitConfig(limit=3, window_seconds=60 * 60),
    "calculator": RateLimitConfig(limit=100, window_seconds=60),
    "calculator_calculate": RateLimitConfig(limit=50, window_seconds=60),
}


def login_key(email: str) -> str:
    return f"login:{email.strip().lower()}"


def password_reset_key(email: str) -> str:
    return f"password-reset:{email.strip().lower()}"
