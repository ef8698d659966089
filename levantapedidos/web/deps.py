"""FastAPI dependencies for settings and the upstream client."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from levantapedidos.clients.dominio import (
    MISSING_TOKEN_DETAILS,
    MISSING_TOKEN_MESSAGE,
    DominioClient,
)
from levantapedidos.core.config import Settings, get_settings
from levantapedidos.core.errors import ConfigurationError


def settings_dep() -> Settings:
    """Settings dependency (overridable in tests)."""
    return get_settings()


SettingsDep = Annotated[Settings, Depends(settings_dep)]


def get_dominio_client(request: Request, settings: Settings) -> DominioClient:
    """Shared DominioDZ client for the application.

    Handlers call this after the body has been validated, so a bad request
    is still a 400 when the token is missing.

    Raises:
        ConfigurationError: If DOMINIO_TOKEN is missing (answered as 500
            before any upstream call)

    """
    if not settings.has_dominio_token:
        raise ConfigurationError(MISSING_TOKEN_MESSAGE, MISSING_TOKEN_DETAILS)

    client = getattr(request.app.state, "dominio", None)
    if client is None:
        client = DominioClient.from_settings(settings)
        request.app.state.dominio = client
    return client

