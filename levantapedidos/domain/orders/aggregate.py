"""Per-SKU aggregation of sale records."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from levantapedidos.domain.orders.models import AggregatedProduct, SaleRecord

_UNIT = Decimal("1")
_CENT = Decimal("0.01")


def _dec(value: float) -> Decimal:
    # str() keeps the shortest repr, so 280.5 stays 280.5 instead of its binary expansion
    return Decimal(str(value))


def round_half_up(value: float | Decimal) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3)."""
    d = value if isinstance(value, Decimal) else _dec(value)
    return int(d.quantize(_UNIT, rounding=ROUND_HALF_UP))


def round_money(value: float | Decimal) -> float:
    """Round to 2 decimals, ties away from zero."""
    d = value if isinstance(value, Decimal) else _dec(value)
    return float(d.quantize(_CENT, rounding=ROUND_HALF_UP))


def monthly_average(qty_total: float, months_count: int) -> int:
    """Average units per distinct month; 0 when no month was seen."""
    if months_count <= 0:
        return 0
    return round_half_up(_dec(qty_total) / months_count)


def aggregate_sales(records: Iterable[SaleRecord]) -> dict[str, AggregatedProduct]:
    """Group records by SKU and compute the rounded monthly average.

    Description, price and stock are taken from the last record seen for the
    SKU in iteration order (not the most recent date).

    Args:
        records: Sale records of one comparison period

    Returns:
        Mapping SKU -> AggregatedProduct with `avg_qty` filled in

    """
    products: dict[str, AggregatedProduct] = {}

    for sale in records:
        entry = products.get(sale.clave)
        if entry is None:
            entry = AggregatedProduct(
                clave=sale.clave,
                descripcion=sale.descripcion,
                precio=sale.precio,
                existencia=sale.existencia,
            )
            products[sale.clave] = entry
        else:
            entry.descripcion = sale.descripcion
            entry.precio = sale.precio
            entry.existencia = sale.existencia

        entry.qty_total += sale.cantidad
        entry.months.add((sale.fecha.year, sale.fecha.month))

    for entry in products.values():
        entry.avg_qty = monthly_average(entry.qty_total, len(entry.months))

    return products


def accumulate_current_month(records: Iterable[SaleRecord]) -> dict[str, float]:
    """Sum quantities per SKU for the month-to-date records."""
    totals: dict[str, float] = {}
    for sale in records:
        totals[sale.clave] = totals.get(sale.clave, 0) + sale.cantidad
    return totals


__all__ = [
    "accumulate_current_month",
    "aggregate_sales",
    "monthly_average",
    "round_half_up",
    "round_money",
]
