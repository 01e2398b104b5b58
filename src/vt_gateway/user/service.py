"""Auth domain service: credential check, session minting, password reset.

All DB operations use the injected AsyncSession. Transactions for the
password reset writes are managed by the caller (router layer) via
`async with db.begin()`.
"""

import asyncio
import logging
import secrets
from datetime import timedelta
from urllib.parse import urlencode

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from config.settings import settings
from src.vt_common.datetime_utils import utc_now
from src.vt_common.enums import UserStatus
from src.vt_common.errors import (
    AccountBlockedError,
    InvalidCredentialsError,
    PasswordResetTokenError,
    RateLimitedError,
)
from src.vt_gateway.auth.password import hash_password, verify_password
from src.vt_gateway.auth.session import Session
from src.vt_gateway.ratelimit.config import RATE_LIMITS, login_key, password_reset_key
from src.vt_gateway.ratelimit.registry import get_rate_limiter
from src.vt_gateway.ratelimit.types import RateLimiter
from src.vt_gateway.user.db_models import PasswordResetTokenModel, UserModel
from src.vt_gateway.user.notifications import LoggingResetLinkSender, ResetLinkSender

logger = logging.getLogger("vt.auth")

# Unknown or blocked emails wait this long before the generic answer
_ENUMERATION_DELAY_SECONDS = 0.5


def session_from_user(user: UserModel) -> Session:
    return Session(
        user_id=str(user.id),
        email=user.email,
        name=user.name,
        role=user.role,
        status=user.status,
    )


class AuthService:
    """Stateless apart from its collaborators — instantiate once, reuse across requests."""

    def __init__(
        self,
        limiter: RateLimiter | None = None,
        sender: ResetLinkSender | None = None,
    ) -> None:
        self._limiter = limiter
        self._sender: ResetLinkSender = sender or LoggingResetLinkSender()

    async def _get_limiter(self) -> RateLimiter:
        return self._limiter or await get_rate_limiter()

    async def _find_user(self, email: str, db: AsyncSession) -> UserModel | None:
        result = await db.execute(select(UserModel).where(UserModel.email == email))
        return result.scalar_one_or_none()

    async def authorize(self, email: str, password: str, db: AsyncSession) -> Session:
        """Check credentials and return the session payload to sign.

        The rate limit is consulted first: a locked-out email never reaches
        the database or bcrypt, even with the right password.

        Note: "Unknown email" and "Wrong password" both raise
        InvalidCredentialsError — prevents account enumeration. A blocked
        account is reported before the password is checked.
        """
        email = email.strip().lower()
        limiter = await self._get_limiter()
        key = login_key(email)

        rate = await limiter.check(key, RATE_LIMITS["login"])
        if not rate.allowed:
            logger.warning("login rate limited retry_after=%ss", rate.retry_after_seconds)
            raise RateLimitedError(rate.retry_after_seconds or 1)

        user = await self._find_user(email, db)
        if user is not None and user.status == UserStatus.BLOCKED.value:
            logger.info("login refused for blocked user=%s", user.id)
            raise AccountBlockedError()

        if user is None or not await run_in_threadpool(
            verify_password, password, user.password_hash
        ):
            logger.info("login failed, %d attempts left in window", rate.remaining)
            raise InvalidCredentialsError()

        await limiter.reset(key)
        logger.info("login succeeded user=%s role=%s", user.id, user.role)
        return session_from_user(user)

    async def request_password_reset(self, email: str, db: AsyncSession) -> None:
        """Issue a reset link if the account exists and is active.

        Always completes without revealing whether the email is known. The
        caller must wrap this in `async with db.begin()`.
        """
        email = email.strip().lower()
        limiter = await self._get_limiter()

        rate = await limiter.check(password_reset_key(email), RATE_LIMITS["password_reset"])
        if not rate.allowed:
            logger.warning("password reset rate limited retry_after=%ss", rate.retry_after_seconds)
            raise RateLimitedError(rate.retry_after_seconds or 1)

        user = await self._find_user(email, db)
        if user is None or user.status == UserStatus.BLOCKED.value:
            await asyncio.sleep(_ENUMERATION_DELAY_SECONDS)
            return

        # One live token per email
        await db.execute(
            delete(PasswordResetTokenModel).where(PasswordResetTokenModel.email == user.email)
        )
        token = secrets.token_hex(32)
        db.add(
            PasswordResetTokenModel(
                token=token,
                email=user.email,
                expires_at=utc_now()
                + timedelta(minutes=settings.PASSWORD_RESET_TOKEN_TTL_MINUTES),
            )
        )
        await db.flush()

        link = f"{settings.APP_BASE_URL}/reset-password?{urlencode({'token': token})}"
        await self._sender.send(user.email, link)

    async def validate_reset_token(
        self, token: str, db: AsyncSession
    ) -> PasswordResetTokenModel:
        result = await db.execute(
            select(PasswordResetTokenModel).where(PasswordResetTokenModel.token == token)
        )
        reset_token = result.scalar_one_or_none()
        if reset_token is None:
            raise PasswordResetTokenError()
        if reset_token.used_at is not None:
            raise PasswordResetTokenError("This reset link has already been used")
        if utc_now() > reset_token.expires_at:
            raise PasswordResetTokenError("This reset link has expired")
        return reset_token

    async def reset_password(self, token: str, password: str, db: AsyncSession) -> None:
        """Set a new password and consume the token.

        The caller must wrap this in `async with db.begin()` so the password
        update and the token consumption commit together.
        """
        reset_token = await self.validate_reset_token(token, db)

        user = await self._find_user(reset_token.email, db)
        if user is None:
            raise PasswordResetTokenError()
        if user.status == UserStatus.BLOCKED.value:
            raise AccountBlockedError()

        user.password_hash = await run_in_threadpool(hash_password, password)
        reset_token.used_at = utc_now()
        await db.flush()
        logger.info("password reset completed user=%s", user.id)
