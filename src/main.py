"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from config.settings import settings
from src.vt_calculator.api.cors import CalculatorCorsMiddleware
from src.vt_calculator.api.router import router as calculator_router
from src.vt_common.database import engine, ping_database
from src.vt_common.datetime_utils import utc_now
from src.vt_common.errors import AppError, UnavailableError
from src.vt_common.response import error_response
from src.vt_gateway.api.router import login_page_router, session_router
from src.vt_gateway.api.router import router as auth_router
from src.vt_gateway.auth.dependencies import GuardRedirect
from src.vt_gateway.middleware.edge_router import EdgeRouterMiddleware
from src.vt_gateway.middleware.request_log import RequestLogMiddleware
from src.vt_gateway.ratelimit.registry import close_rate_limiter, get_rate_limiter
from src.vt_portal.api.router import router as portal_router

logger = logging.getLogger("vt.app")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB, start the rate limiter. Shutdown: dispose both."""
    # Startup
    await ping_database()
    await get_rate_limiter()
    yield
    # Shutdown
    await close_rate_limiter()
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# Last added runs first: request log → calculator CORS → edge router → routes
app.add_middleware(EdgeRouterMiddleware)
app.add_middleware(CalculatorCorsMiddleware)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, exc.data)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
        headers=exc.headers or None,
    )


@app.exception_handler(GuardRedirect)
async def guard_redirect_handler(request: Request, exc: GuardRedirect) -> RedirectResponse:
    return RedirectResponse(exc.location, status_code=303)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    unavailable = UnavailableError()
    resp = error_response(unavailable.code, unavailable.message)
    return JSONResponse(status_code=unavailable.http_status, content=resp.model_dump())


app.include_router(auth_router, prefix="/api")
app.include_router(session_router, prefix="/api")
app.include_router(calculator_router, prefix="/api")
app.include_router(login_page_router)
app.include_router(portal_router)


@app.get("/")
async def landing() -> dict[str, str]:
    return {"name": settings.APP_NAME, "login": "/login"}


@app.get("/api/health")
async def health() -> JSONResponse:
    database: dict[str, object] = {"status": "disconnected"}
    try:
        database = {"status": "connected", "latency_ms": round(await ping_database(), 1)}
    except Exception:
        logger.exception("health check: database unreachable")

    healthy = database["status"] == "connected"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": utc_now().isoformat(),
            "version": settings.APP_VERSION,
            "checks": {"database": database},
        },
        headers={"Cache-Control": "no-store, no-cache, must-revalidate"},
    )
