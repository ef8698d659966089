"""DominioDZ API client.

Thin wrapper around BaseHTTPClient for the generic `procedimientogen2`
endpoint. Every call posts the same envelope; the `opcion` field in
`paramjs2` selects the stored query.
"""

from __future__ import annotations

import time
from typing import Any

from levantapedidos.clients.http import BaseHTTPClient
from levantapedidos.core.config import Settings
from levantapedidos.core.errors import ConfigurationError, UpstreamError
from levantapedidos.core.logging import get_logger
from levantapedidos.core.metrics import upstream_duration_seconds, upstream_requests_total

log = get_logger("levantapedidos.dominio")

OPCION_SALES_BY_PERIOD = "ventaxclientexperiodo"
OPCION_CLIENT_BY_KEY = "clientexclave"
OPCION_CLIENT_PRICE_LIST = "listatotalxcliente"

MISSING_TOKEN_MESSAGE = "Token de API no configurado. Contacta al administrador."
MISSING_TOKEN_DETAILS = "DOMINIO_TOKEN environment variable is required"


class DominioClient:
    """DominioDZ API client."""

    def __init__(
        self,
        token: str,
        endpoint: str,
        *,
        empresa: str = "CONTI",
        usuario: str = "consultas",
        cusert: str = "CUSERT",
        procedimiento: str = "apiconsultas",
        guser: str = "conti",
        http: BaseHTTPClient | None = None,
    ):
        """Initialize DominioDZ client.

        Args:
            token: API token placed in both envelope levels
            endpoint: Full URL of the procedure endpoint
            empresa: Company code
            usuario: API user
            cusert: Certificate user
            procedimiento: Stored procedure wrapper name
            guser: Group user inside paramjs2
            http: Preconfigured HTTP client (defaults to BaseHTTPClient(endpoint))

        """
        if not token:
            raise ConfigurationError(MISSING_TOKEN_MESSAGE, MISSING_TOKEN_DETAILS)
        self.token = token
        self.empresa = empresa
        self.usuario = usuario
        self.cusert = cusert
        self.procedimiento = procedimiento
        self.guser = guser
        self.http = http or BaseHTTPClient(
            endpoint,
            default_headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> DominioClient:
        """Build a client from explicit settings.

        Raises:
            ConfigurationError: If DOMINIO_TOKEN is not configured

        """
        if not settings.has_dominio_token:
            raise ConfigurationError(MISSING_TOKEN_MESSAGE, MISSING_TOKEN_DETAILS)
        http = BaseHTTPClient(
            settings.dominio_endpoint,
            default_headers={"Content-Type": "application/json", "Accept": "application/json"},
            timeout_sec=settings.http_timeout_seconds,
            cb_fail_threshold=settings.cb_fail_threshold,
            cb_reset_timeout=settings.cb_reset_timeout,
            max_retries=settings.http_max_retries,
            backoff_base=settings.http_backoff_base,
            backoff_max=settings.http_backoff_max,
        )
        return cls(
            settings.dominio_token,
            settings.dominio_endpoint,
            empresa=settings.dominio_empresa,
            usuario=settings.dominio_usuario,
            cusert=settings.dominio_cusert,
            procedimiento=settings.dominio_procedimiento,
            guser=settings.dominio_guser,
            http=http,
        )

    async def close(self) -> None:
        await self.http.close()

    def build_envelope(self, opcion: str, paramjs: dict[str, Any]) -> dict[str, Any]:
        """Request body shared by every procedure."""
        return {
            "empresa": self.empresa,
            "usuario": self.usuario,
            "token": self.token,
            "cusert": self.cusert,
            "procedimiento": self.procedimiento,
            "paramjs": paramjs,
            "paramjs2": {"opcion": opcion, "guser": self.guser, "token": self.token},
        }

    async def call(self, opcion: str, paramjs: dict[str, Any]) -> Any:
        """Execute one procedure and return the decoded JSON payload.

        Raises:
            UpstreamError: On transport failure, non-2xx status or invalid JSON

        """
        t0 = time.perf_counter()
        try:
            data = await self.http.json("POST", json_body=self.build_envelope(opcion, paramjs))
        except UpstreamError as e:
            upstream_requests_total.labels(opcion=opcion, status=str(e.status or "error")).inc()
            raise
        finally:
            upstream_duration_seconds.labels(opcion=opcion).observe(time.perf_counter() - t0)

        upstream_requests_total.labels(opcion=opcion, status="ok").inc()
        return data

    async def call_list(self, opcion: str, paramjs: dict[str, Any]) -> list[dict]:
        """Execute a procedure expected to return an array; anything else is no data."""
        data = await self.call(opcion, paramjs)
        if not isinstance(data, list):
            log.warning(
                "non_array_payload",
                extra={"opcion": opcion, "payload_sample": str(data)[:256]},
            )
            return []
        return data

    async def fetch_sales_by_date_range(
        self, client_id: str, date_from: str, date_to: str
    ) -> list[dict]:
        """Sale lines of a client between two ISO dates (inclusive)."""
        return await self.call_list(
            OPCION_SALES_BY_PERIOD,
            {"cliente": client_id, "fecha1": date_from, "fecha2": date_to},
        )

    async def fetch_client_data(self, client_id: str) -> dict | None:
        """Client master record: first element of an array payload, or the object itself."""
        data = await self.call(OPCION_CLIENT_BY_KEY, {"cliente": client_id})
        if isinstance(data, list):
            data = data[0] if data else None
        return data if isinstance(data, dict) and data else None

    async def fetch_client_pricing(self, client_id: str) -> list[dict]:
        """Client-specific price list."""
        rows = await self.call_list(OPCION_CLIENT_PRICE_LIST, {"cliente": client_id})
        log.info("client_pricing_fetched", extra={"client_id": client_id, "rows": len(rows)})
        return rows


__all__ = [
    "DominioClient",
    "MISSING_TOKEN_DETAILS",
    "MISSING_TOKEN_MESSAGE",
    "OPCION_CLIENT_BY_KEY",
    "OPCION_CLIENT_PRICE_LIST",
    "OPCION_SALES_BY_PERIOD",
]
