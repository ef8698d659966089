"""Tests for client data, pricing and product search."""

from __future__ import annotations

import pytest

from levantapedidos.core.errors import ClientNotFoundError
from levantapedidos.services.catalog import get_client_data, get_client_pricing, search_products

PRICE_LIST = [
    {"clave": "TOR-001", "descripcion": "Tornillo hexagonal 1/4", "precio": 1.5},
    {"clave": "TOR-002", "descripcion": "Tornillo cabeza plana", "precio": 1.2},
    {"sku": "TUE-010", "description": "Tuerca 1/4", "price": 0.8},
    {"clave": "ARA-100", "descripcion": "Arandela de presion", "precio": 0.3},
]


@pytest.mark.asyncio
async def test_get_client_data_returns_record(fake_dominio):
    fake_dominio.client_data = {"clave": "C001", "nombre": "Ferreteria Centro"}

    data = await get_client_data(fake_dominio, "C001")

    assert data["nombre"] == "Ferreteria Centro"
    assert fake_dominio.calls == [("client", "C001")]


@pytest.mark.asyncio
async def test_get_client_data_missing_raises(fake_dominio):
    with pytest.raises(ClientNotFoundError):
        await get_client_data(fake_dominio, "NOPE")


@pytest.mark.asyncio
async def test_get_client_pricing_passthrough(fake_dominio):
    fake_dominio.pricing = PRICE_LIST

    assert await get_client_pricing(fake_dominio, "C001") == PRICE_LIST


@pytest.mark.asyncio
async def test_search_matches_key_and_description(fake_dominio):
    fake_dominio.pricing = PRICE_LIST

    by_desc = await search_products(fake_dominio, "C001", "tornillo")
    by_key = await search_products(fake_dominio, "C001", "tue")

    assert [r["clave"] for r in by_desc] == ["TOR-001", "TOR-002"]
    assert by_key == [PRICE_LIST[2]]


@pytest.mark.asyncio
async def test_search_respects_limit(fake_dominio):
    fake_dominio.pricing = PRICE_LIST

    result = await search_products(fake_dominio, "C001", "1/4", limit=1)

    assert result == [PRICE_LIST[0]]


@pytest.mark.asyncio
async def test_short_term_skips_upstream(fake_dominio):
    fake_dominio.pricing = PRICE_LIST

    assert await search_products(fake_dominio, "C001", "to") == []
    assert fake_dominio.calls == []
