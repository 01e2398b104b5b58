"""Role home endpoints for the admin and dealer areas.

GET /admin   — admin home (ADMIN only; dealers are sent to /dealer)
GET /dealer  — dealer home (DEALER only; admins are sent to /admin)

The edge router already redirects wrong-role callers; the guard
dependencies repeat the check so the handlers stay safe if they are ever
mounted behind a different front door.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.vt_common.response import ApiResponse, success_response
from src.vt_gateway.auth.dependencies import require_admin, require_dealer
from src.vt_gateway.auth.session import Session
from src.vt_gateway.user.schemas import SessionInfo

router = APIRouter(tags=["portal"])


def _home(request: Request, area: str, session: Session) -> ApiResponse:
    resp = success_response({"area": area, "user": SessionInfo.from_session(session).model_dump()})
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/admin")
async def admin_home(
    request: Request,
    session: Annotated[Session, Depends(require_admin)],
) -> ApiResponse:
    return _home(request, "admin", session)


@router.get("/dealer")
async def dealer_home(
    request: Request,
    session: Annotated[Session, Depends(require_dealer)],
) -> ApiResponse:
    return _home(request, "dealer", session)
