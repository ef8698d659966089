"""Typed records for the order suggestion engine.

Field names of the serialized output (`to_dict`) follow the JSON contract
consumed by the frontend form.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any


@dataclass(frozen=True)
class SaleRecord:
    """One historical transaction line for a client."""

    clave: str
    descripcion: str
    cantidad: float
    precio: float
    fecha: date
    existencia: int


@dataclass(frozen=True)
class ClientPrice:
    """Client-specific price list entry; `precio` is None when the row had no price."""

    clave: str
    precio: float | None = None

    @property
    def is_priced(self) -> bool:
        return self.precio is not None


@dataclass
class AggregatedProduct:
    """Per-SKU accumulation over one comparison period."""

    clave: str
    descripcion: str
    precio: float
    existencia: int
    qty_total: float = 0
    months: set[tuple[int, int]] = field(default_factory=set)
    avg_qty: int = 0


@dataclass(frozen=True)
class OrderSuggestion:
    """One row of the suggested order."""

    sku: str
    descripcion: str
    avg_last_3_months: int
    avg_same_month_last_year: int
    acumulado_mes_actual: float
    cantidad_sugerida: int
    precio: float
    subtotal: float
    existencia: int
    has_client_price: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "sku": self.sku,
            "descripcion": self.descripcion,
            "avgLast3Months": self.avg_last_3_months,
            "avgSameMonthLastYear": self.avg_same_month_last_year,
            "acumuladoMesActual": self.acumulado_mes_actual,
            "cantidadSugerida": self.cantidad_sugerida,
            "precio": self.precio,
            "subtotal": self.subtotal,
            "existencia": self.existencia,
            "hasClientPrice": self.has_client_price,
        }


@dataclass(frozen=True)
class OrderTotals:
    """Aggregate figures over all suggestions of one invocation."""

    total_items: int
    total_value: float
    total_products: int
    total_acumulado_mes_actual: float
    total_value_acumulado_mes_actual: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalItems": self.total_items,
            "totalValue": self.total_value,
            "totalProducts": self.total_products,
            "totalAcumuladoMesActual": self.total_acumulado_mes_actual,
            "totalValueAcumuladoMesActual": self.total_value_acumulado_mes_actual,
        }


@dataclass(frozen=True)
class OrderSummary:
    """Ranked suggestions plus totals for a target month."""

    suggestions: list[OrderSuggestion]
    summary: OrderTotals
    month: int
    year: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "suggestions": [s.to_dict() for s in self.suggestions],
            "summary": self.summary.to_dict(),
            "month": self.month,
            "year": self.year,
        }


@dataclass(frozen=True)
class SuggestedOrder:
    """Condensed summary shown on the suggested-order card."""

    pedido_sugerido_units: int
    pedido_sugerido_value: float
    unds_inicial: int
    valor_mes_actual: float
    stock: int
    sin_stock: int
    total_products: int
    month: int
    year: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "pedidoSugeridoUnits": self.pedido_sugerido_units,
            "pedidoSugeridoValue": self.pedido_sugerido_value,
            "undsInicial": self.unds_inicial,
            "valorMesActual": self.valor_mes_actual,
            "stock": self.stock,
            "sinStock": self.sin_stock,
            "totalProducts": self.total_products,
            "month": self.month,
            "year": self.year,
        }
