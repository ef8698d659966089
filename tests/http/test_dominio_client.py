"""Tests for the DominioDZ client envelope and payload handling."""

from unittest.mock import AsyncMock

import pytest

from levantapedidos.clients.dominio import (
    MISSING_TOKEN_MESSAGE,
    OPCION_CLIENT_BY_KEY,
    OPCION_CLIENT_PRICE_LIST,
    OPCION_SALES_BY_PERIOD,
    DominioClient,
)
from levantapedidos.core.config import Settings
from levantapedidos.core.errors import ConfigurationError, UpstreamError

ENDPOINT = "https://dominio.test/sconsultas/procedimientogen2"


@pytest.fixture
def client():
    c = DominioClient("tok-1", ENDPOINT)
    c.http.json = AsyncMock(return_value=[])
    return c


def sent_body(client) -> dict:
    return client.http.json.await_args.kwargs["json_body"]


def test_envelope_shape(client):
    body = client.build_envelope(OPCION_CLIENT_BY_KEY, {"cliente": "C001"})

    assert body == {
        "empresa": "CONTI",
        "usuario": "consultas",
        "token": "tok-1",
        "cusert": "CUSERT",
        "procedimiento": "apiconsultas",
        "paramjs": {"cliente": "C001"},
        "paramjs2": {"opcion": "clientexclave", "guser": "conti", "token": "tok-1"},
    }


def test_missing_token_raises():
    with pytest.raises(ConfigurationError) as exc_info:
        DominioClient("", ENDPOINT)
    assert str(exc_info.value) == MISSING_TOKEN_MESSAGE


def test_from_settings_requires_token():
    with pytest.raises(ConfigurationError):
        DominioClient.from_settings(Settings(_env_file=None, dominio_token="   "))


def test_from_settings_applies_http_tuning():
    s = Settings(
        _env_file=None,
        dominio_token="abc",
        dominio_empresa="ACME",
        http_timeout_seconds=5,
        http_max_retries=3,
    )
    c = DominioClient.from_settings(s)

    assert c.empresa == "ACME"
    assert c.http.timeout_sec == 5
    assert c.http.max_retries == 3
    assert c.http.base_url == s.dominio_endpoint


@pytest.mark.asyncio
async def test_sales_by_date_range_params(client):
    client.http.json.return_value = [{"clave": "A"}]

    rows = await client.fetch_sales_by_date_range("C001", "2025-01-01", "2025-01-31")

    assert rows == [{"clave": "A"}]
    body = sent_body(client)
    assert body["paramjs"] == {"cliente": "C001", "fecha1": "2025-01-01", "fecha2": "2025-01-31"}
    assert body["paramjs2"]["opcion"] == OPCION_SALES_BY_PERIOD


@pytest.mark.asyncio
async def test_non_array_payload_is_empty(client):
    client.http.json.return_value = {"error": "sin datos"}

    assert await client.fetch_sales_by_date_range("C001", "2025-01-01", "2025-01-31") == []


@pytest.mark.asyncio
async def test_client_pricing_opcion(client):
    client.http.json.return_value = [{"clave": "A", "precio": 1}]

    assert await client.fetch_client_pricing("C001") == [{"clave": "A", "precio": 1}]
    assert sent_body(client)["paramjs2"]["opcion"] == OPCION_CLIENT_PRICE_LIST


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload,expected",
    [
        ([{"nombre": "Uno"}, {"nombre": "Dos"}], {"nombre": "Uno"}),
        ({"nombre": "Solo"}, {"nombre": "Solo"}),
        ([], None),
        ({}, None),
        (None, None),
    ],
)
async def test_client_data_shapes(client, payload, expected):
    client.http.json.return_value = payload

    assert await client.fetch_client_data("C001") == expected


@pytest.mark.asyncio
async def test_upstream_error_propagates(client):
    client.http.json.side_effect = UpstreamError("Upstream API error: 500", status=500)

    with pytest.raises(UpstreamError):
        await client.fetch_client_pricing("C001")
