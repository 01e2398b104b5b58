"""Session token creation, verification and cookie transport.

HS256 (symmetric HMAC) with AUTH_SECRET. The token is the whole session:
there is no server-side session table, so logout only clears the cookie.

NOTE: No revocation list. A leaked token stays valid until expiry; keep
SESSION_MAX_AGE_DAYS short if that matters more than convenience.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import Response

from config.settings import settings
from src.vt_common.errors import InvalidSessionTokenError
from src.vt_gateway.auth.session import DecodedSession, Session

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_MAX_AGE = timedelta(days=settings.SESSION_MAX_AGE_DAYS)
_UPDATE_AGE = timedelta(hours=settings.SESSION_UPDATE_AGE_HOURS)
_TOKEN_TYPE = "session"

# Every cookie a browser may still hold from an earlier session
_AUTH_COOKIES = (
    "vt.session-token",
    "__Secure-vt.session-token",
    "vt.callback-url",
    "__Secure-vt.callback-url",
)


def session_cookie_name() -> str:
    """``__Secure-`` prefixed in production, where cookies are HTTPS-only."""
    if settings.is_production:
        return "__Secure-vt.session-token"
    return "vt.session-token"


def create_session_token(session: Session, now: datetime | None = None) -> str:
    """Issue a session token valid for SESSION_MAX_AGE_DAYS (default: 30 days)."""
    issued = now or datetime.now(UTC)
    payload = {
        "sub": session.user_id,
        "email": session.email,
        "name": session.name,
        "role": session.role.value,
        "status": session.status.value,
        "type": _TOKEN_TYPE,
        "iat": issued,
        "exp": issued + _MAX_AGE,
    }
    return str(jwt.encode(payload, settings.AUTH_SECRET, algorithm=_ALGORITHM))


def decode_session_token(token: str) -> DecodedSession:
    """Verify signature, expiry and type, then rebuild the Session.

    Raises:
        InvalidSessionTokenError: bad signature, expired, wrong type or
        claims that do not describe a valid session.
    """
    try:
        payload = jwt.decode(
            token,
            settings.AUTH_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidSessionTokenError() from None

    if payload.get("type") != _TOKEN_TYPE:
        raise InvalidSessionTokenError()

    try:
        session = Session(
            user_id=payload["sub"],
            email=payload["email"],
            name=payload["name"],
            role=payload["role"],
            status=payload["status"],
        )
        issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=UTC)
        expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=UTC)
    except (KeyError, TypeError, ValueError, ValidationError):
        raise InvalidSessionTokenError() from None

    return DecodedSession(session=session, issued_at=issued_at, expires_at=expires_at)


def needs_renewal(decoded: DecodedSession, now: datetime | None = None) -> bool:
    """True once the token is older than SESSION_UPDATE_AGE_HOURS."""
    current = now or datetime.now(UTC)
    return current - decoded.issued_at >= _UPDATE_AGE


def read_session_token(request: Request) -> str | None:
    """Session cookie first, then ``Authorization: Bearer`` for API clients."""
    token = request.cookies.get(session_cookie_name())
    if token:
        return token
    auth_header = request.headers.get("authorization", "")
    scheme, _, credentials = auth_header.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        session_cookie_name(),
        token,
        max_age=int(_MAX_AGE.total_seconds()),
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )


def clear_session_cookies(response: Response) -> None:
    for name in _AUTH_COOKIES:
        response.delete_cookie(name, path="/")
