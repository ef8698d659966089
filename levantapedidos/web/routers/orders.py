"""Order suggestion API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request

from levantapedidos.core.logging import get_logger
from levantapedidos.core.metrics import suggestions_generated_total
from levantapedidos.services.sales_summary import compute_sales_summary, compute_suggested_order
from levantapedidos.web.deps import SettingsDep, get_dominio_client
from levantapedidos.web.schemas import ClientRequest, SalesSummaryRequest

log = get_logger("levantapedidos.web.orders")

router = APIRouter(prefix="/api", tags=["orders"])


@router.post("/sales-summary")
async def sales_summary(payload: SalesSummaryRequest, request: Request, settings: SettingsDep):
    """Ranked order suggestion for a client and target month.

    Compares the trailing 3 months with the same month last year (+3 prior),
    clamps by stock and prices with the client's list when available.
    """
    client = get_dominio_client(request, settings)
    log.info(
        "generating_suggestions",
        extra={"client_id": payload.client_id, "month": payload.month, "year": payload.year},
    )
    summary = await compute_sales_summary(
        client,
        payload.client_id,
        payload.month,
        payload.year,
        max_concurrency=settings.dominio_max_concurrency,
    )
    suggestions_generated_total.labels(endpoint="sales-summary").inc(len(summary.suggestions))
    return summary.to_dict()


@router.post("/suggested-order")
async def suggested_order(payload: ClientRequest, request: Request, settings: SettingsDep):
    """Suggested order card figures for next calendar month."""
    client = get_dominio_client(request, settings)
    order = await compute_suggested_order(
        client, payload.client_id, max_concurrency=settings.dominio_max_concurrency
    )
    suggestions_generated_total.labels(endpoint="suggested-order").inc(order.total_products)
    return order.to_dict()
