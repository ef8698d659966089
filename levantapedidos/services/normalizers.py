"""DominioDZ response normalizers.

Upstream rows have no fixed schema: the SKU may arrive as `clave`, `sku` or
`codigo`, the price as `precio` or `price`, numbers sometimes as strings.
These functions resolve that once so the engine only sees typed records.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any

from levantapedidos.core.logging import get_logger
from levantapedidos.domain.orders.models import ClientPrice, SaleRecord

log = get_logger("levantapedidos.normalizers")

SKU_FIELDS = ("clave", "sku", "codigo")
PRICE_FIELDS = ("precio", "price")
DESCRIPTION_FIELDS = ("descripcion", "description")
SEARCH_SKU_FIELDS = ("clave", "sku")


def _first(row: dict, names: tuple[str, ...]) -> Any:
    for name in names:
        value = row.get(name)
        if value is not None and value != "":
            return value
    return None


def _to_float(value: Any) -> float | None:
    """Parse a number (int/float/numeric string); None if not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value) if isinstance(value, (int, float)) else float(str(value).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _to_date(value: Any) -> date | None:
    """Parse `YYYY-MM-DD` or a full ISO timestamp (with optional Z)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            return None


def sku_of(row: dict) -> str:
    """Canonical SKU of an upstream row ('' when absent)."""
    value = _first(row, SKU_FIELDS)
    return str(value).strip() if value is not None else ""


def description_of(row: dict) -> str:
    value = _first(row, DESCRIPTION_FIELDS)
    return str(value) if value is not None else ""


def norm_sales(rows: list[dict]) -> list[SaleRecord]:
    """Normalize `ventaxclientexperiodo` rows into SaleRecord.

    Input fields (may vary):
    - fecha, clave|sku|codigo, descripcion, cantidad, precio|price, existencia

    Rows without SKU or with an unparseable date are dropped.
    """
    out: list[SaleRecord] = []
    skipped = 0
    for r in rows:
        if not isinstance(r, dict):
            skipped += 1
            continue

        clave = sku_of(r)
        fecha = _to_date(r.get("fecha"))
        if not clave or fecha is None:
            skipped += 1
            continue

        existencia = _to_float(r.get("existencia")) or 0.0

        out.append(
            SaleRecord(
                clave=clave,
                descripcion=description_of(r),
                cantidad=max(0.0, _to_float(r.get("cantidad")) or 0.0),
                precio=max(0.0, _to_float(_first(r, PRICE_FIELDS)) or 0.0),
                fecha=fecha,
                existencia=max(0, int(existencia)),
            )
        )

    if skipped:
        log.warning("sales_rows_skipped", extra={"skipped": skipped, "kept": len(out)})
    return out


def norm_client_prices(rows: list[dict]) -> list[ClientPrice]:
    """Normalize `listatotalxcliente` rows into ClientPrice.

    A row whose price fields are both missing (or non-numeric) keeps
    `precio=None` and is ignored by the engine. Rows without SKU are dropped.
    """
    out: list[ClientPrice] = []
    for r in rows:
        if not isinstance(r, dict):
            continue
        clave = sku_of(r)
        if not clave:
            continue
        out.append(ClientPrice(clave=clave, precio=_to_float(_first(r, PRICE_FIELDS))))
    return out


def matches_search(row: dict, term: str) -> bool:
    """Case-insensitive substring match of `term` on `clave`/`sku` or description."""
    needle = term.lower()
    sku = _first(row, SEARCH_SKU_FIELDS)
    sku_text = str(sku).lower() if sku is not None else ""
    return needle in sku_text or needle in description_of(row).lower()


__all__ = [
    "description_of",
    "matches_search",
    "norm_client_prices",
    "norm_sales",
    "sku_of",
]
