"""Calendar-month date ranges for the comparison windows."""

from __future__ import annotations

import calendar
from datetime import date
from typing import NamedTuple

LAST_3_MONTHS_OFFSETS = (1, 2, 3)
SAME_MONTH_LAST_YEAR_OFFSETS = (0, 1, 2, 3)


class DateRange(NamedTuple):
    """Inclusive date range."""

    start: date
    end: date

    def as_params(self) -> tuple[str, str]:
        """ISO strings as expected by the upstream `fecha1`/`fecha2` params."""
        return self.start.isoformat(), self.end.isoformat()


class PlannedRanges(NamedTuple):
    last_3_months: list[DateRange]
    same_month_last_year: list[DateRange]


def shift_month(month: int, year: int, offset: int) -> tuple[int, int]:
    """Move `offset` months back from (month, year), rolling the year over."""
    index = year * 12 + (month - 1) - offset
    return index % 12 + 1, index // 12


def month_range(year: int, month: int) -> DateRange:
    """Full calendar month, first to last day inclusive."""
    last_day = calendar.monthrange(year, month)[1]
    return DateRange(date(year, month, 1), date(year, month, last_day))


def _ranges(month: int, year: int, offsets: tuple[int, ...]) -> list[DateRange]:
    out = []
    for offset in offsets:
        m, y = shift_month(month, year, offset)
        out.append(month_range(y, m))
    return out


def plan_date_ranges(month: int, year: int) -> PlannedRanges:
    """Build the trailing-3-months and same-month-last-year ranges.

    Trailing ranges go from the month just before the target outward; the
    last-year ranges start at the target month one year earlier and walk back
    three more months.

    Raises:
        ValueError: If month is outside 1..12

    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")

    return PlannedRanges(
        last_3_months=_ranges(month, year, LAST_3_MONTHS_OFFSETS),
        same_month_last_year=_ranges(month, year - 1, SAME_MONTH_LAST_YEAR_OFFSETS),
    )


def current_month_range(today: date) -> DateRange:
    """Month-to-date: day 1 of today's month through today."""
    return DateRange(today.replace(day=1), today)


def next_month(today: date) -> tuple[int, int]:
    """(month, year) of the calendar month following `today`."""
    return shift_month(today.month, today.year, -1)


__all__ = [
    "DateRange",
    "PlannedRanges",
    "current_month_range",
    "month_range",
    "next_month",
    "plan_date_ranges",
    "shift_month",
]
