"""FastAPI middleware."""

from __future__ import annotations

from levantapedidos.web.middleware.prometheus import PrometheusMiddleware
from levantapedidos.web.middleware.request_context import RequestContextMiddleware

__all__ = ["PrometheusMiddleware", "RequestContextMiddleware"]
