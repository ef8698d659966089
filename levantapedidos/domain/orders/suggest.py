"""Order suggestion engine.

Blends the two comparison-period averages with stock and client pricing into
a ranked order proposal.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from levantapedidos.domain.orders.aggregate import round_money
from levantapedidos.domain.orders.models import (
    AggregatedProduct,
    ClientPrice,
    OrderSuggestion,
    OrderSummary,
    OrderTotals,
    SuggestedOrder,
)


def build_price_lookup(price_list: Iterable[ClientPrice] | None) -> dict[str, float]:
    """SKU -> client price, keeping only entries that carry a price."""
    lookup: dict[str, float] = {}
    for entry in price_list or ():
        if entry.is_priced:
            lookup[entry.clave] = entry.precio
    return lookup


def clamp_to_stock(qty: int, existencia: int) -> int:
    """Limit suggested quantity by available stock; never raises it."""
    if existencia <= 0:
        return 0
    return min(qty, existencia)


def _union_keys(*mappings: Mapping[str, object]) -> list[str]:
    seen: dict[str, None] = {}
    for mapping in mappings:
        for key in mapping:
            seen.setdefault(key, None)
    return list(seen)


def build_suggestion(
    sku: str,
    last3: AggregatedProduct | None,
    same_month: AggregatedProduct | None,
    acumulado: float,
    client_price: float | None,
) -> OrderSuggestion:
    """Construct one row; metadata comes from the trailing period when present."""
    meta = last3 or same_month
    avg3 = last3.avg_qty if last3 else 0
    avg_ly = same_month.avg_qty if same_month else 0
    existencia = meta.existencia if meta else 0

    qty = clamp_to_stock(max(avg3, avg_ly), existencia)

    has_client_price = client_price is not None
    precio = client_price if has_client_price else (meta.precio if meta else 0.0)

    return OrderSuggestion(
        sku=sku,
        descripcion=meta.descripcion if meta else "",
        avg_last_3_months=avg3,
        avg_same_month_last_year=avg_ly,
        acumulado_mes_actual=acumulado,
        cantidad_sugerida=qty,
        precio=precio,
        subtotal=round_money(qty * precio),
        existencia=existencia,
        has_client_price=has_client_price,
    )


def summarize(suggestions: list[OrderSuggestion]) -> OrderTotals:
    """Totals over the rows; current-month value uses each row's resolved price."""
    return OrderTotals(
        total_items=sum(s.cantidad_sugerida for s in suggestions),
        total_value=round_money(sum(s.subtotal for s in suggestions)),
        total_products=len(suggestions),
        total_acumulado_mes_actual=sum(s.acumulado_mes_actual for s in suggestions),
        total_value_acumulado_mes_actual=round_money(
            sum(s.acumulado_mes_actual * s.precio for s in suggestions)
        ),
    )


def build_order_summary(
    month: int,
    year: int,
    *,
    last_3_months: Mapping[str, AggregatedProduct],
    same_month_last_year: Mapping[str, AggregatedProduct],
    current_month: Mapping[str, float],
    client_prices: Iterable[ClientPrice] | None = None,
) -> OrderSummary:
    """Produce the ranked order suggestion for a target month.

    Algorithm:
    1. Price lookup from client list (priced entries only)
    2. Union of SKUs: trailing, then last-year, then current-month keys
    3. suggested = max(avg3, avg_last_year) clamped by stock
    4. price = client price if any, else historical
    5. Sort by subtotal DESC (stable)

    Args:
        month: Target month (1-12)
        year: Target year
        last_3_months: Aggregates of the trailing 3 full months
        same_month_last_year: Aggregates of the target month last year + 3 prior
        current_month: Month-to-date quantity per SKU
        client_prices: Normalized client price list (optional)

    Returns:
        OrderSummary with ranked suggestions and totals

    """
    prices = build_price_lookup(client_prices)

    suggestions = [
        build_suggestion(
            sku,
            last_3_months.get(sku),
            same_month_last_year.get(sku),
            current_month.get(sku, 0),
            prices.get(sku),
        )
        for sku in _union_keys(last_3_months, same_month_last_year, current_month)
    ]
    # sorted() is stable: equal subtotals keep first-seen order
    suggestions = sorted(suggestions, key=lambda s: s.subtotal, reverse=True)

    return OrderSummary(
        suggestions=suggestions,
        summary=summarize(suggestions),
        month=month,
        year=year,
    )


def build_suggested_order(order: OrderSummary) -> SuggestedOrder:
    """Condense an OrderSummary into the suggested-order card figures."""
    rows = order.suggestions
    return SuggestedOrder(
        pedido_sugerido_units=order.summary.total_items,
        pedido_sugerido_value=order.summary.total_value,
        unds_inicial=order.summary.total_items,
        valor_mes_actual=order.summary.total_value_acumulado_mes_actual,
        stock=sum(1 for s in rows if s.existencia > 0),
        sin_stock=sum(1 for s in rows if s.existencia == 0 and s.cantidad_sugerida > 0),
        total_products=order.summary.total_products,
        month=order.month,
        year=order.year,
    )


__all__ = [
    "build_order_summary",
    "build_price_lookup",
    "build_suggested_order",
    "build_suggestion",
    "clamp_to_stock",
    "summarize",
]
