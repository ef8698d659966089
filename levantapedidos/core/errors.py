"""Exception hierarchy shared by clients, services and the web layer."""

from __future__ import annotations


class LevantapedidosError(Exception):
    """Base error for the application."""


class ConfigurationError(LevantapedidosError):
    """Required configuration (e.g. upstream credential) is missing."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.details = details


class UpstreamError(LevantapedidosError):
    """DominioDZ call failed: transport error, non-2xx status or bad payload."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class ClientNotFoundError(LevantapedidosError):
    """Upstream returned no record for the requested client."""


__all__ = [
    "LevantapedidosError",
    "ConfigurationError",
    "UpstreamError",
    "ClientNotFoundError",
]
