"""Public calculator REST endpoints (no session required).

GET  /calculator/countries     — countries                (100 req/min/IP)
GET  /calculator/states        — states of ?country_id=   (100 req/min/IP)
GET  /calculator/cities        — quotable cities of ?state_id= (100 req/min/IP)
GET  /calculator/ports         — ?type=destination, origin ports of ?state_id=,
                                 or all ports with optional ?country_id=
                                                           (100 req/min/IP)
POST /calculator/calculate     — transport price quote    (50 req/min/IP)

Every response carries X-RateLimit-* headers; over the limit → 429.
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.vt_calculator.api.cors import cache_headers
from src.vt_calculator.application.schemas import CalculateRequest
from src.vt_calculator.application.service import CalculatorService
from src.vt_common.database import get_db_session
from src.vt_common.response import ApiResponse, success_response
from src.vt_gateway.ratelimit.http import RateLimitGuard

router = APIRouter(prefix="/calculator", tags=["calculator"])

_service = CalculatorService()
_reference_limit = RateLimitGuard("calculator")
_calculate_limit = RateLimitGuard("calculator_calculate")


@router.get("/countries", dependencies=[Depends(_reference_limit)])
async def list_countries(
    request: Request,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    countries = await _service.list_countries(db)
    response.headers.update(cache_headers())
    resp = success_response({"countries": [c.model_dump() for c in countries]})
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/states", dependencies=[Depends(_reference_limit)])
async def list_states(
    request: Request,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    country_id: str | None = Query(None),
) -> ApiResponse:
    states = await _service.list_states(db, country_id)
    response.headers.update(cache_headers())
    resp = success_response({"states": [s.model_dump() for s in states]})
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/cities", dependencies=[Depends(_reference_limit)])
async def list_cities(
    request: Request,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    state_id: str | None = Query(None),
) -> ApiResponse:
    cities = await _service.list_cities(db, state_id)
    response.headers.update(cache_headers())
    resp = success_response({"cities": [c.model_dump() for c in cities]})
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/ports", dependencies=[Depends(_reference_limit)])
async def list_ports(
    request: Request,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    country_id: str | None = Query(None),
    state_id: str | None = Query(None),
    port_type: Literal["origin", "destination"] | None = Query(None, alias="type"),
) -> ApiResponse:
    ports = await _service.list_ports(db, country_id, state_id, port_type)
    response.headers.update(cache_headers())
    resp = success_response({"ports": [p.model_dump() for p in ports]})
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/calculate", dependencies=[Depends(_calculate_limit)])
async def calculate(
    request: Request,
    body: CalculateRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.calculate(db, body)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
