"""Client master data, price list and product search."""

from __future__ import annotations

from levantapedidos.clients.dominio import DominioClient
from levantapedidos.core.errors import ClientNotFoundError
from levantapedidos.core.logging import get_logger
from levantapedidos.services.normalizers import matches_search

log = get_logger("levantapedidos.catalog")

MIN_SEARCH_LENGTH = 3


async def get_client_data(client: DominioClient, client_id: str) -> dict:
    """Client master record.

    Raises:
        ClientNotFoundError: If upstream has no record for the client

    """
    data = await client.fetch_client_data(client_id)
    if not data:
        raise ClientNotFoundError(f"No data for client {client_id}")
    log.debug("client_data", extra={"client_id": client_id, "fields": sorted(data)})
    return data


async def get_client_pricing(client: DominioClient, client_id: str) -> list[dict]:
    """Client price list as returned by upstream."""
    return await client.fetch_client_pricing(client_id)


async def search_products(
    client: DominioClient, client_id: str, term: str, limit: int = 20
) -> list[dict]:
    """Products of the client price list whose SKU or description contains `term`.

    Terms shorter than MIN_SEARCH_LENGTH return no results without calling upstream.
    """
    if not term or len(term) < MIN_SEARCH_LENGTH:
        return []

    rows = await client.fetch_client_pricing(client_id)
    found = [r for r in rows if isinstance(r, dict) and matches_search(r, term)]

    log.info(
        "product_search",
        extra={"client_id": client_id, "term": term, "matches": len(found), "limit": limit},
    )
    return found[:limit]


__all__ = ["MIN_SEARCH_LENGTH", "get_client_data", "get_client_pricing", "search_products"]
