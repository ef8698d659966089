"""Client data, pricing and product search endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request

from levantapedidos.core.errors import UpstreamError
from levantapedidos.core.logging import get_logger
from levantapedidos.services.catalog import get_client_data, get_client_pricing, search_products
from levantapedidos.web.deps import SettingsDep, get_dominio_client
from levantapedidos.web.errors import error_response
from levantapedidos.web.schemas import ClientRequest, ProductSearchRequest

log = get_logger("levantapedidos.web.clients")

router = APIRouter(prefix="/api", tags=["clients"])


@router.post("/client-data")
async def client_data(payload: ClientRequest, request: Request, settings: SettingsDep):
    """Client master record (404 when upstream has none)."""
    client = get_dominio_client(request, settings)
    try:
        return await get_client_data(client, payload.client_id)
    except UpstreamError as e:
        log.error("client_data_failed", extra={"client_id": payload.client_id, "error": str(e)})
        return error_response(500, "Error al consultar datos del cliente", str(e))


@router.post("/client-pricing")
async def client_pricing(payload: ClientRequest, request: Request, settings: SettingsDep):
    """Client-specific price list."""
    client = get_dominio_client(request, settings)
    try:
        pricing = await get_client_pricing(client, payload.client_id)
    except UpstreamError as e:
        log.error("client_pricing_failed", extra={"client_id": payload.client_id, "error": str(e)})
        return error_response(500, "Error al consultar precios del cliente", str(e))
    return pricing


@router.post("/product-search")
async def product_search(payload: ProductSearchRequest, request: Request, settings: SettingsDep):
    """Case-insensitive search on SKU/description, capped at `limit`."""
    client = get_dominio_client(request, settings)
    limit = min(payload.limit or settings.search_default_limit, settings.search_max_limit)
    try:
        return await search_products(client, payload.client_id, payload.search_term, limit)
    except UpstreamError as e:
        log.error("product_search_failed", extra={"client_id": payload.client_id, "error": str(e)})
        return error_response(500, "Error al buscar productos", str(e))
