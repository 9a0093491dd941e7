from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Sequence

import pandas as pd

from .errors import InvalidPeriodError
from .periods import Period, compare_periods, parse_period

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: Sequence[str] = ("date", "amount")
OPTIONAL_COLUMNS: Sequence[str] = ("withholding", "other_deductions")


@dataclass(frozen=True)
class LedgerEntry:
    period: Period
    amount: float
    withholding: float = 0.0
    other_deductions: float = 0.0


@dataclass(frozen=True)
class AmountsBreakdown:
    original_amount: float
    final_amount: float
    final_amount_gross: float


class DeductionsCollaborator(Protocol):
    def get_amounts_breakdown(self, entry: LedgerEntry) -> AmountsBreakdown:
        ...


class EntryDeductions:
    """Resolves amounts from the deductions recorded on the entry itself."""

    def get_amounts_breakdown(self, entry: LedgerEntry) -> AmountsBreakdown:
        gross = entry.amount - entry.other_deductions
        return AmountsBreakdown(
            original_amount=entry.amount,
            final_amount=gross - entry.withholding,
            final_amount_gross=gross,
        )


@dataclass(frozen=True)
class TimeSeriesPoint:
    period: Period
    value: float
    observation_count: int


def filter_entries_by_period(
    entries: Iterable[LedgerEntry],
    start: Optional[Period] = None,
    end: Optional[Period] = None,
) -> List[LedgerEntry]:
    filtered = list(entries)
    if start is not None:
        filtered = [e for e in filtered if compare_periods(e.period, start) >= 0]
    if end is not None:
        filtered = [e for e in filtered if compare_periods(e.period, end) <= 0]
    return filtered


def build_monthly_series(
    entries: Iterable[LedgerEntry],
    include_withheld_amount: bool = False,
    deductions: Optional[DeductionsCollaborator] = None,
) -> List[TimeSeriesPoint]:
    """
    Aggregate ledger entries into one point per calendar month.

    Months without entries get no point; nothing is forward-filled.
    """
    if deductions is None:
        deductions = EntryDeductions()

    rows = []
    for entry in entries:
        amounts = deductions.get_amounts_breakdown(entry)
        value = amounts.final_amount_gross if include_withheld_amount else amounts.final_amount
        rows.append({"year": entry.period.year, "month": entry.period.month, "value": float(value)})

    if not rows:
        return []

    frame = pd.DataFrame.from_records(rows)
    monthly = (
        frame.groupby(["year", "month"], sort=True)["value"]
        .agg(total="sum", observations="count")
        .reset_index()
    )

    return [
        TimeSeriesPoint(
            period=Period(month=int(row.month), year=int(row.year)),
            value=float(row.total),
            observation_count=int(row.observations),
        )
        for row in monthly.itertuples(index=False)
    ]


def _coerce_period(raw: str) -> Optional[Period]:
    try:
        return parse_period(raw)
    except InvalidPeriodError:
        return None


def load_ledger_csv(ledger_path: Path) -> List[LedgerEntry]:
    df = pd.read_csv(ledger_path, dtype={"date": str})
    missing = set(REQUIRED_COLUMNS) - set(df.columns)
    if missing:
        raise ValueError(f"Ledger data missing required columns: {sorted(missing)}")

    for column in OPTIONAL_COLUMNS:
        if column not in df.columns:
            df[column] = 0.0

    df["period"] = df["date"].map(_coerce_period)
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce")
    for column in OPTIONAL_COLUMNS:
        df[column] = pd.to_numeric(df[column], errors="coerce").fillna(0.0)

    cleaned = df.dropna(subset=["period", "amount"])
    dropped = len(df) - len(cleaned)
    if dropped:
        logger.warning(f"Dropped {dropped} ledger rows with malformed date or amount")
    if cleaned.empty:
        raise ValueError("No usable rows left in ledger. Check the date (MM/YYYY) and amount columns.")

    return [
        LedgerEntry(
            period=row.period,
            amount=float(row.amount),
            withholding=float(row.withholding),
            other_deductions=float(row.other_deductions),
        )
        for row in cleaned.itertuples(index=False)
    ]
