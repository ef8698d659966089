"""Request correlation and access logging middleware."""

from __future__ import annotations

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from levantapedidos.core.logging import get_logger, set_request_id

log = get_logger("levantapedidos.access")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a request id, log one access line per request, echo the id back."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = set_request_id(request.headers.get(REQUEST_ID_HEADER))
        start = time.perf_counter()

        response = await call_next(request)

        log.info(
            "request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "elapsed_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        response.headers[REQUEST_ID_HEADER] = rid
        return response
