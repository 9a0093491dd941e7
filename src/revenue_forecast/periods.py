from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from functools import total_ordering

from dateutil.relativedelta import relativedelta

from .errors import InvalidPeriodError


@total_ordering
@dataclass(frozen=True)
class Period:
    """A calendar month. Ordered by year, then month."""

    month: int
    year: int

    def __lt__(self, other: "Period") -> bool:
        if not isinstance(other, Period):
            return NotImplemented
        return compare_periods(self, other) < 0

    def __str__(self) -> str:
        return format_period(self)


def parse_period(raw: str) -> Period:
    parts = str(raw).strip().split("/")
    if len(parts) != 2:
        raise InvalidPeriodError(f"Period must look like MM/YYYY, got {raw!r}")
    try:
        month = int(parts[0])
        year = int(parts[1])
    except ValueError as exc:
        raise InvalidPeriodError(f"Period components must be integers, got {raw!r}") from exc
    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"Month must be within 1-12, got {month} in {raw!r}")
    return Period(month=month, year=year)


def format_period(period: Period) -> str:
    return f"{period.month:02d}/{period.year}"


def add_months(period: Period, n: int) -> Period:
    shifted = date(period.year, period.month, 1) + relativedelta(months=n)
    return Period(month=shifted.month, year=shifted.year)


def compare_periods(a: Period, b: Period) -> int:
    key_a = (a.year, a.month)
    key_b = (b.year, b.month)
    if key_a == key_b:
        return 0
    return -1 if key_a < key_b else 1

