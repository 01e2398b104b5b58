"""Auth API routers.

router (mounted under /api, public):
  POST /auth/login                       credentials → session cookie
  POST /auth/password-reset/request      email → reset link (generic answer)
  GET  /auth/password-reset/validate     token → {valid, email}
  POST /auth/password-reset/confirm      token + new password

login_page_router (public):
  GET  /login                            login page state (callbackUrl, error)

session_router (mounted under /api, requires a session):
  GET  /session                          current session
  POST /session/logout                   clear session cookies (GET also accepted)

All JSON endpoints return ApiResponse. request_id is read from
request.state (injected by RequestLogMiddleware).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.vt_common.database import get_db_session
from src.vt_common.errors import AccountBlockedError
from src.vt_common.response import ApiResponse, success_response
from src.vt_gateway.auth.dependencies import require_authenticated
from src.vt_gateway.auth.session import Session
from src.vt_gateway.auth.session_token import (
    clear_session_cookies,
    create_session_token,
    set_session_cookie,
)
from src.vt_gateway.user.schemas import (
    ForgotPasswordRequest,
    LoginPageState,
    LoginRequest,
    LoginResponse,
    ResetPasswordRequest,
    ResetTokenStatus,
    SessionInfo,
)
from src.vt_gateway.user.service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])
login_page_router = APIRouter(tags=["auth"])
session_router = APIRouter(prefix="/session", tags=["session"])
_service = AuthService()

_RESET_REQUESTED_MESSAGE = (
    "If an account exists with this email, you will receive a password reset link."
)


def _get_request_id(request: Request) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", "req_unknown")


def _respond(request: Request, data: object = None, message: str = "success") -> ApiResponse:
    resp = success_response(data, message=message)
    resp.request_id = _get_request_id(request)
    return resp


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Credential login",
)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    session = await _service.authorize(body.email, body.password, db)
    set_session_cookie(response, create_session_token(session))

    data = LoginResponse(
        user=SessionInfo.from_session(session),
        expires_in=settings.SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
        redirect_to=session.home,
    )
    return _respond(request, data.model_dump(), "Login successful")


@router.post(
    "/password-reset/request",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Request a password reset link",
)
async def request_password_reset(
    request: Request,
    body: ForgotPasswordRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    async with db.begin():
        await _service.request_password_reset(body.email, db)
    return _respond(request, message=_RESET_REQUESTED_MESSAGE)


@router.get(
    "/password-reset/validate",
    response_model=ApiResponse,
    summary="Check a password reset token",
)
async def validate_reset_token(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    token: str = Query(..., min_length=1),
) -> ApiResponse:
    reset_token = await _service.validate_reset_token(token, db)
    data = ResetTokenStatus(valid=True, email=reset_token.email)
    return _respond(request, data.model_dump())


@router.post(
    "/password-reset/confirm",
    response_model=ApiResponse,
    summary="Set a new password with a reset token",
)
async def confirm_password_reset(
    request: Request,
    body: ResetPasswordRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    async with db.begin():
        await _service.reset_password(body.token, body.password, db)
    return _respond(
        request,
        message="Your password has been reset successfully. You can now login with your new password.",
    )


@login_page_router.get("/login", response_model=LoginPageState, summary="Login page state")
async def login_page(
    callback_url: str | None = Query(None, alias="callbackUrl"),
    error: str | None = Query(None),
) -> LoginPageState:
    message = AccountBlockedError().message if error == "blocked" else None
    return LoginPageState(callback_url=callback_url, error=error, message=message)


@session_router.get("", response_model=ApiResponse, summary="Current session")
async def current_session(
    request: Request,
    session: Annotated[Session, Depends(require_authenticated)],
) -> ApiResponse:
    return _respond(request, SessionInfo.from_session(session).model_dump())


@session_router.api_route(
    "/logout",
    methods=["GET", "POST"],
    response_model=ApiResponse,
    summary="Log out",
)
async def logout(request: Request, response: Response) -> ApiResponse:
    clear_session_cookies(response)
    return _respond(request, {"success": True}, "Logged out")
