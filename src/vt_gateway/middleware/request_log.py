"""Request logging middleware.

Outermost middleware: logs every HTTP request, redirects and CSRF
rejections from the edge router included, with method, path, status code,
latency, client IP and a short request ID for correlation. The request_id is
injected into request.state so router handlers can include it in ApiResponse.

Log format:
    INFO [POST] /api/auth/login → 200 (23ms) ip=203.0.113.7 req_a1b2c3d4e5f6
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.vt_gateway.ratelimit.http import get_client_ip

logger = logging.getLogger("vt.request")


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.request_id = f"req_{uuid.uuid4().hex[:12]}"

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "[%s] %s → %d (%.0fms) ip=%s %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            get_client_ip(request),
            request.state.request_id,
        )
        return response
