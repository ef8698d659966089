"""Prometheus metrics middleware for FastAPI."""

from __future__ import annotations

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from levantapedidos.core.metrics import (
    http_request_duration_seconds,
    http_requests_in_progress,
    http_requests_total,
)

# Label values are bounded to known routes so scanners can't blow up cardinality
KNOWN_ENDPOINTS = frozenset(
    {
        "/",
        "/health",
        "/metrics",
        "/api/sales-summary",
        "/api/client-data",
        "/api/client-pricing",
        "/api/product-search",
        "/api/suggested-order",
    }
)


def normalize_endpoint(path: str) -> str:
    """Map a request path to a metric label."""
    path = path.split("?")[0].rstrip("/") or "/"
    return path if path in KNOWN_ENDPOINTS else "other"


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect Prometheus metrics for HTTP requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        method = request.method
        endpoint = normalize_endpoint(request.url.path)

        http_requests_in_progress.labels(method=method, endpoint=endpoint).inc()
        start_time = time.perf_counter()
        status = "500"
        try:
            response = await call_next(request)
            status = str(response.status_code)
            return response
        finally:
            http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(
                time.perf_counter() - start_time
            )
            http_requests_total.labels(method=method, endpoint=endpoint, status=status).inc()
            http_requests_in_progress.labels(method=method, endpoint=endpoint).dec()
