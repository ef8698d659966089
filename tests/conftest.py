"""Shared pytest fixtures and configuration."""

from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from levantapedidos.core.config import Settings
from levantapedidos.core.errors import UpstreamError
from levantapedidos.domain.orders.models import SaleRecord


class FakeDominioClient:
    """In-memory stand-in for DominioClient.

    `sales` maps (date_from, date_to) to raw upstream rows; ranges whose
    date_from is in `failing_ranges` raise UpstreamError.
    """

    def __init__(self):
        self.sales: dict[tuple[str, str], list[dict]] = {}
        self.pricing: list[dict] = []
        self.client_data: dict | None = None
        self.failing_ranges: set[str] = set()
        self.fail_pricing = False
        self.fail_client_data = False
        self.calls: list[tuple] = []

    async def fetch_sales_by_date_range(self, client_id, date_from, date_to):
        self.calls.append(("sales", client_id, date_from, date_to))
        if date_from in self.failing_ranges:
            raise UpstreamError(f"DominioDZ API error: 500 for {date_from}", status=500)
        return list(self.sales.get((date_from, date_to), []))

    async def fetch_client_pricing(self, client_id):
        self.calls.append(("pricing", client_id))
        if self.fail_pricing:
            raise UpstreamError("DominioDZ API error: 503 Service Unavailable", status=503)
        return list(self.pricing)

    async def fetch_client_data(self, client_id):
        self.calls.append(("client", client_id))
        if self.fail_client_data:
            raise UpstreamError("DominioDZ API error: 502 Bad Gateway", status=502)
        return self.client_data

    async def close(self):
        pass


@pytest.fixture
def fake_dominio() -> FakeDominioClient:
    return FakeDominioClient()


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the developer's .env."""
    return Settings(_env_file=None, dominio_token="test-token-123")


@pytest.fixture
def make_sale():
    """Factory for SaleRecord with sensible defaults."""

    def _make(
        clave: str = "PROD001",
        cantidad: float = 1,
        fecha: date = date(2025, 1, 15),
        precio: float = 10.0,
        existencia: int = 100,
        descripcion: str | None = None,
    ) -> SaleRecord:
        return SaleRecord(
            clave=clave,
            descripcion=descripcion if descripcion is not None else f"Producto {clave}",
            cantidad=cantidad,
            precio=precio,
            fecha=fecha,
            existencia=existencia,
        )

    return _make


@pytest.fixture
def api(fake_dominio, settings):
    """Test client with upstream client and settings overridden."""
    from levantapedidos.web.deps import settings_dep
    from levantapedidos.web.main import app

    app.dependency_overrides[settings_dep] = lambda: settings

    with TestClient(app) as c:
        app.state.dominio = fake_dominio
        yield c

    app.dependency_overrides.clear()
