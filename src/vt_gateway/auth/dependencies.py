"""FastAPI dependencies: current session and role guards.

Usage in any protected router:
    from src.vt_gateway.auth.dependencies import require_admin

    @router.get("/admin/dealers")
    async def dealers(session: Annotated[Session, Depends(require_admin)]):
        ...

A failed guard raises GuardRedirect, which the app turns into a 303 to the
login page or the caller's own home area.
"""

from typing import Annotated

from fastapi import Depends, Request

from src.vt_common.enums import UserRole
from src.vt_common.errors import InvalidSessionTokenError
from src.vt_gateway.auth.guards import AuthzResult, Redirect, check_authenticated, check_role
from src.vt_gateway.auth.session import Session
from src.vt_gateway.auth.session_token import decode_session_token, read_session_token


class GuardRedirect(Exception):
    """Control-flow exit raised by guard dependencies; handled in src.main."""

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(location)


def get_optional_session(request: Request) -> Session | None:
    """Session decoded by EdgeRouterMiddleware, or decoded here when it did not run."""
    if hasattr(request.state, "session"):
        return request.state.session
    token = read_session_token(request)
    if token is None:
        return None
    try:
        return decode_session_token(token).session
    except InvalidSessionTokenError:
        return None


OptionalSession = Annotated[Session | None, Depends(get_optional_session)]


def _unwrap(result: AuthzResult) -> Session:
    if isinstance(result, Redirect):
        raise GuardRedirect(result.location)
    return result.session


async def require_authenticated(request: Request, session: OptionalSession) -> Session:
    return _unwrap(check_authenticated(session, request.url.path))


async def require_admin(request: Request, session: OptionalSession) -> Session:
    return _unwrap(check_role(session, UserRole.ADMIN, request.url.path))


async def require_dealer(request: Request, session: OptionalSession) -> Session:
    return _unwrap(check_role(session, UserRole.DEALER, request.url.path))
