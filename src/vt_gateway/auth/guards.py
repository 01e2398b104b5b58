"""Role guards as plain functions returning an explicit AuthzResult.

The guards never raise and never touch the database: they look at the
session they are given and either allow it or name the place to send the
caller. Framework code (dependencies.py, the edge router) turns a Redirect
into an HTTP redirect.

    check_authenticated(None, "/admin/dealers")
        → Redirect("/login?callbackUrl=%2Fadmin%2Fdealers")
    check_role(dealer_session, UserRole.ADMIN, "/admin")
        → Redirect("/dealer")
"""

from dataclasses import dataclass
from urllib.parse import quote

from src.vt_common.enums import ROLE_HOME, UserRole
from src.vt_gateway.auth.session import Session

LOGIN_PATH = "/login"
BLOCKED_LOGIN_PATH = "/login?error=blocked"


@dataclass(frozen=True)
class Allowed:
    session: Session


@dataclass(frozen=True)
class Redirect:
    location: str


AuthzResult = Allowed | Redirect


def login_redirect(callback_path: str | None) -> str:
    if not callback_path:
        return LOGIN_PATH
    return f"{LOGIN_PATH}?callbackUrl={quote(callback_path, safe='')}"


def check_authenticated(session: Session | None, path: str | None = None) -> AuthzResult:
    if session is None:
        return Redirect(login_redirect(path))
    if session.is_blocked:
        return Redirect(BLOCKED_LOGIN_PATH)
    return Allowed(session)


def check_role(session: Session | None, role: UserRole, path: str | None = None) -> AuthzResult:
    result = check_authenticated(session, path)
    if isinstance(result, Redirect):
        return result
    if result.session.role != role:
        # Send the caller to their own area, not an error page
        return Redirect(ROLE_HOME[result.session.role])
    return result
