"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Session
  3xxx: Calculator
  9xxx: System

Login failures are surfaced with one shared message for unknown email and
wrong password so callers cannot tell which accounts exist. A blocked
account is not a secret and keeps its own message.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        data: object = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.data = data
        self.headers = headers or {}
        super().__init__(message)


# --- 1xxx: Auth/Session ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid email or password", 401)


class AccountBlockedError(AppError):
    def __init__(self) -> None:
        super().__init__(
            1002, "Your account has been blocked. Please contact administrator.", 403
        )


class InvalidSessionTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Session token is invalid or expired", 401)


class PasswordResetTokenError(AppError):
    def __init__(self, reason: str = "Invalid or expired reset link") -> None:
        super().__init__(1004, reason, 400)


# --- 3xxx: Calculator ---

class PriceNotConfiguredError(AppError):
    def __init__(self, details: list[str]) -> None:
        super().__init__(3001, "Price calculation not available", 422, data={"details": details})


class MissingParameterError(AppError):
    def __init__(self, name: str) -> None:
        super().__init__(3002, f"Missing required parameter: {name}", 400)


class ReferenceNotFoundError(AppError):
    def __init__(self, kind: str) -> None:
        super().__init__(3003, f"{kind} not found", 404)


# --- 9xxx: System ---

class RateLimitedError(AppError):
    def __init__(
        self,
        retry_after_seconds: int,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.retry_after_seconds = retry_after_seconds
        merged = {"Retry-After": str(retry_after_seconds)}
        merged.update(headers or {})
        super().__init__(
            9001,
            f"Too many requests. Please try again in {retry_after_seconds} seconds.",
            429,
            data={"retry_after_seconds": retry_after_seconds},
            headers=merged,
        )


class CsrfRejectedError(AppError):
    def __init__(self) -> None:
        super().__init__(9002, "Forbidden - CSRF validation failed", 403)


class UnavailableError(AppError):
    def __init__(self, http_status: int = 500) -> None:
        super().__init__(9003, "Service temporarily unavailable", http_status)
