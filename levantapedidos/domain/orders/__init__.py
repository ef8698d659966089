"""Order suggestion engine: date planning, aggregation and ranking."""

from __future__ import annotations

from levantapedidos.domain.orders.aggregate import accumulate_current_month, aggregate_sales
from levantapedidos.domain.orders.periods import (
    current_month_range,
    next_month,
    plan_date_ranges,
)
from levantapedidos.domain.orders.suggest import build_order_summary, build_suggested_order

__all__ = [
    "accumulate_current_month",
    "aggregate_sales",
    "build_order_summary",
    "build_suggested_order",
    "current_month_range",
    "next_month",
    "plan_date_ranges",
]
