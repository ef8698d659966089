"""FastAPI application for the levantapedidos frontend."""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from levantapedidos import __version__
from levantapedidos.core.config import Settings, get_settings
from levantapedidos.core.logging import get_logger
from levantapedidos.core.metrics import app_info, app_uptime_seconds
from levantapedidos.web.errors import install_exception_handlers
from levantapedidos.web.middleware import PrometheusMiddleware, RequestContextMiddleware
from levantapedidos.web.routers import clients, orders

log = get_logger("levantapedidos.web")

APP_START_TIME = time.time()

CORS_METHODS = ["GET", "POST", "OPTIONS"]
CORS_HEADERS = ["Content-Type"]
CORS_MAX_AGE = 86400


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.dominio = None
    log.info("app_started", extra={"version": __version__})
    yield
    if app.state.dominio is not None:
        await app.state.dominio.close()
        app.state.dominio = None
    log.info("app_stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Levantapedidos API",
        version=__version__,
        description="Order suggestions from DominioDZ sales history",
        lifespan=lifespan,
    )

    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
        max_age=CORS_MAX_AGE,
    )

    install_exception_handlers(app)

    app.include_router(orders.router)
    app.include_router(clients.router)

    @app.get("/", tags=["Monitoring"])
    def root():
        return {
            "message": "Levantapedidos API is running!",
            "version": __version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/health", tags=["Monitoring"])
    def health():
        """Basic health check for monitoring."""
        return {"status": "healthy"}

    @app.get("/metrics", tags=["Monitoring"])
    def metrics():
        """Prometheus metrics endpoint."""
        app_uptime_seconds.set(time.time() - APP_START_TIME)
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # CORSMiddleware only answers requests carrying Origin and
    # Access-Control-Request-Method; any other OPTIONS lands here.
    @app.options("/{path:path}", include_in_schema=False)
    def options(path: str):
        headers = {
            "Access-Control-Allow-Methods": ", ".join(CORS_METHODS),
            "Access-Control-Allow-Headers": ", ".join(CORS_HEADERS),
            "Access-Control-Max-Age": str(CORS_MAX_AGE),
        }
        if "*" in settings.allowed_origins:
            headers["Access-Control-Allow-Origin"] = "*"
        return Response(status_code=200, headers=headers)

    app_info.labels(version=__version__, environment=settings.app_env).set(1)
    return app


app = create_app()
