"""Sales summary service facade.

Fetches every comparison window concurrently, normalizes the rows and runs
the suggestion engine. A failed range contributes zero records; a failed
price list falls back to historical prices.
"""

from __future__ import annotations

import asyncio
from datetime import date
from typing import Any

from levantapedidos.clients.dominio import DominioClient
from levantapedidos.core.errors import UpstreamError
from levantapedidos.core.logging import get_logger
from levantapedidos.core.metrics import range_fetch_failures_total
from levantapedidos.domain.orders.aggregate import accumulate_current_month, aggregate_sales
from levantapedidos.domain.orders.models import (
    ClientPrice,
    OrderSummary,
    SaleRecord,
    SuggestedOrder,
)
from levantapedidos.domain.orders.periods import (
    DateRange,
    current_month_range,
    next_month,
    plan_date_ranges,
)
from levantapedidos.domain.orders.suggest import build_order_summary, build_suggested_order
from levantapedidos.services.normalizers import norm_client_prices, norm_sales

log = get_logger("levantapedidos.sales_summary")

PERIOD_LAST_3 = "last3"
PERIOD_SAME_MONTH = "same_month_last_year"
PERIOD_CURRENT = "current_month"
PERIOD_PRICING = "pricing"


async def _fetch_range(
    client: DominioClient,
    client_id: str,
    rng: DateRange,
    sem: asyncio.Semaphore,
) -> list[SaleRecord]:
    date_from, date_to = rng.as_params()
    async with sem:
        rows = await client.fetch_sales_by_date_range(client_id, date_from, date_to)
    return norm_sales(rows)


async def _fetch_prices(
    client: DominioClient, client_id: str, sem: asyncio.Semaphore
) -> list[ClientPrice]:
    async with sem:
        rows = await client.fetch_client_pricing(client_id)
    return norm_client_prices(rows)


def _settle(result: Any, client_id: str, period: str, rng: DateRange | None = None) -> list:
    """Rows of a finished fetch; a failed fetch contributes none."""
    if not isinstance(result, BaseException):
        return result
    if not isinstance(result, Exception):
        raise result

    range_fetch_failures_total.labels(period=period).inc()
    extra = {
        "client_id": client_id,
        "period": period,
        "error": str(result) or type(result).__name__,
        "error_type": type(result).__name__,
    }
    if rng is not None:
        event = "range_fetch_failed"
        extra["date_from"], extra["date_to"] = rng.as_params()
    else:
        event = "client_pricing_unavailable"
        extra["fallback"] = "historical_price"

    if isinstance(result, UpstreamError):
        log.warning(event, extra=extra)
    else:
        log.error(event, extra=extra, exc_info=result)
    return []


async def compute_sales_summary(
    client: DominioClient,
    client_id: str,
    month: int,
    year: int,
    *,
    today: date | None = None,
    max_concurrency: int = 4,
) -> OrderSummary:
    """Build the order summary for `client_id` targeting month/year.

    Args:
        client: DominioDZ client
        client_id: Client key in DominioDZ
        month: Target month (1-12)
        year: Target year
        today: Reference date for the month-to-date window (default: today)
        max_concurrency: Upper bound of simultaneous upstream calls

    Returns:
        OrderSummary with ranked suggestions

    """
    today = today or date.today()
    ranges = plan_date_ranges(month, year)
    current = current_month_range(today)
    sem = asyncio.Semaphore(max_concurrency)

    log.info(
        "sales_summary_started",
        extra={"client_id": client_id, "month": month, "year": year},
    )

    last3 = ranges.last_3_months
    same = ranges.same_month_last_year
    results = await asyncio.gather(
        *(_fetch_range(client, client_id, r, sem) for r in last3),
        *(_fetch_range(client, client_id, r, sem) for r in same),
        _fetch_range(client, client_id, current, sem),
        _fetch_prices(client, client_id, sem),
        return_exceptions=True,
    )

    n3 = len(last3)
    ny = len(same)
    last3_sales = [
        s
        for r, res in zip(last3, results[:n3])
        for s in _settle(res, client_id, PERIOD_LAST_3, r)
    ]
    same_month_sales = [
        s
        for r, res in zip(same, results[n3 : n3 + ny])
        for s in _settle(res, client_id, PERIOD_SAME_MONTH, r)
    ]
    current_sales = _settle(results[n3 + ny], client_id, PERIOD_CURRENT, current)
    prices = _settle(results[n3 + ny + 1], client_id, PERIOD_PRICING)

    log.info(
        "sales_fetched",
        extra={
            "client_id": client_id,
            "last3": len(last3_sales),
            "same_month_last_year": len(same_month_sales),
            "current_month": len(current_sales),
            "client_prices": len(prices),
        },
    )

    return build_order_summary(
        month,
        year,
        last_3_months=aggregate_sales(last3_sales),
        same_month_last_year=aggregate_sales(same_month_sales),
        current_month=accumulate_current_month(current_sales),
        client_prices=prices,
    )


async def compute_suggested_order(
    client: DominioClient,
    client_id: str,
    *,
    today: date | None = None,
    max_concurrency: int = 4,
) -> SuggestedOrder:
    """Suggested order figures for the calendar month after `today`."""
    today = today or date.today()
    month, year = next_month(today)
    summary = await compute_sales_summary(
        client, client_id, month, year, today=today, max_concurrency=max_concurrency
    )
    return build_suggested_order(summary)


__all__ = ["compute_sales_summary", "compute_suggested_order"]
