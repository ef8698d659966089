"""Tests for per-SKU sales aggregation."""

from __future__ import annotations

from datetime import date

import pytest

from levantapedidos.domain.orders.aggregate import (
    accumulate_current_month,
    aggregate_sales,
    monthly_average,
    round_half_up,
    round_money,
)


def test_empty_input_yields_empty_mapping():
    assert aggregate_sales([]) == {}
    assert accumulate_current_month([]) == {}


def test_single_month_average_equals_total(make_sale):
    """One distinct month divides by 1."""
    sales = [
        make_sale(cantidad=4, fecha=date(2025, 1, 3)),
        make_sale(cantidad=6, fecha=date(2025, 1, 20)),
    ]

    result = aggregate_sales(sales)

    assert result["PROD001"].qty_total == 10
    assert result["PROD001"].months == {(2025, 1)}
    assert result["PROD001"].avg_qty == 10


def test_average_over_distinct_months(make_sale):
    """10 + 15 + 8 over three months rounds 11.0 -> 11."""
    sales = [
        make_sale(cantidad=10, fecha=date(2025, 1, 15)),
        make_sale(cantidad=15, fecha=date(2025, 2, 15)),
        make_sale(cantidad=8, fecha=date(2025, 3, 15)),
    ]

    assert aggregate_sales(sales)["PROD001"].avg_qty == 11


def test_months_only_counted_when_present(make_sale):
    """A SKU sold in 2 of 3 months averages over 2."""
    sales = [
        make_sale(clave="A", cantidad=5, fecha=date(2025, 1, 20)),
        make_sale(clave="A", cantidad=7, fecha=date(2025, 2, 20)),
        make_sale(clave="B", cantidad=9, fecha=date(2025, 3, 1)),
    ]

    result = aggregate_sales(sales)

    assert result["A"].avg_qty == 6
    assert result["B"].avg_qty == 9


def test_same_month_different_years_are_distinct(make_sale):
    sales = [
        make_sale(cantidad=3, fecha=date(2023, 12, 5)),
        make_sale(cantidad=3, fecha=date(2024, 12, 5)),
    ]
    assert aggregate_sales(sales)["PROD001"].months == {(2023, 12), (2024, 12)}


def test_ties_round_half_up(make_sale):
    """5 units over 2 months = 2.5 -> 3 (not banker's 2)."""
    sales = [
        make_sale(cantidad=2, fecha=date(2025, 1, 1)),
        make_sale(cantidad=3, fecha=date(2025, 2, 1)),
    ]
    assert aggregate_sales(sales)["PROD001"].avg_qty == 3


def test_last_seen_metadata_wins(make_sale):
    """Description, price and stock come from the last record in input order."""
    sales = [
        make_sale(fecha=date(2025, 3, 1), precio=30.0, existencia=7, descripcion="new"),
        make_sale(fecha=date(2025, 1, 1), precio=20.0, existencia=9, descripcion="old"),
    ]

    entry = aggregate_sales(sales)["PROD001"]

    assert entry.precio == 20.0
    assert entry.existencia == 9
    assert entry.descripcion == "old"


def test_fractional_quantities(make_sale):
    sales = [
        make_sale(cantidad=1.5, fecha=date(2025, 1, 1)),
        make_sale(cantidad=2.25, fecha=date(2025, 2, 1)),
    ]
    entry = aggregate_sales(sales)["PROD001"]
    assert entry.qty_total == pytest.approx(3.75)
    assert entry.avg_qty == 2  # 1.875


def test_accumulate_current_month_sums_without_averaging(make_sale):
    sales = [
        make_sale(clave="A", cantidad=2, fecha=date(2025, 10, 1)),
        make_sale(clave="A", cantidad=3, fecha=date(2025, 10, 15)),
        make_sale(clave="B", cantidad=1, fecha=date(2025, 10, 2)),
    ]

    assert accumulate_current_month(sales) == {"A": 5, "B": 1}


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0.5, 1), (1.5, 2), (2.5, 3), (2.4999, 2), (11.0, 11), (0, 0)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [(280.5, 280.5), (1.005, 1.01), (2.675, 2.68), (10.0 / 3, 3.33)],
)
def test_round_money(value, expected):
    assert round_money(value) == expected


def test_monthly_average_without_months_is_zero():
    assert monthly_average(50, 0) == 0
