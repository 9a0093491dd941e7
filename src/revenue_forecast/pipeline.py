from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .backtest import evaluate_accuracy
from .data import (
    DeductionsCollaborator,
    LedgerEntry,
    TimeSeriesPoint,
    build_monthly_series,
    filter_entries_by_period,
)
from .errors import (
    EmptyInputError,
    ForecastError,
    InsufficientHistoryError,
    InvalidHorizonError,
)
from .intervals import attach_confidence_intervals, z_score_for
from .metrics import AccuracyMetrics
from .models import ForecastMethod, effective_model, resolve_model
from .periods import Period, add_months, format_period

logger = logging.getLogger(__name__)

MIN_HISTORY = 6
MAX_HORIZON = 12
DEFAULT_HORIZON = 6


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ForecastOptions:
    include_withheld_amount: bool = False
    alpha: float = 0.2
    beta: float = 0.1
    gamma: float = 0.1
    confidence_level: float = 0.95
    start: Optional[Period] = None
    end: Optional[Period] = None


@dataclass(frozen=True)
class ForecastPoint:
    period: Period
    value: float
    lower_bound: float
    upper_bound: float
    method: ForecastMethod
    confidence_level: float


@dataclass(frozen=True)
class ForecastResult:
    method: ForecastMethod
    requested_method: ForecastMethod
    requested_horizon: int
    historical: Tuple[TimeSeriesPoint, ...]
    forecast: Tuple[ForecastPoint, ...]
    metrics: AccuracyMetrics
    fallback_reason: Optional[str] = None
    generated_at: datetime = field(default_factory=_utc_now, compare=False)

    success: bool = field(default=True, init=False)

    def to_frame(self) -> pd.DataFrame:
        records = [
            {
                "period": format_period(point.period),
                "kind": "historical",
                "value": point.value,
                "lower_bound": np.nan,
                "upper_bound": np.nan,
                "observation_count": point.observation_count,
                "method": "",
            }
            for point in self.historical
        ]
        records.extend(
            {
                "period": format_period(point.period),
                "kind": "forecast",
                "value": point.value,
                "lower_bound": point.lower_bound,
                "upper_bound": point.upper_bound,
                "observation_count": 0,
                "method": point.method.value,
            }
            for point in self.forecast
        )
        return pd.DataFrame.from_records(records)


@dataclass(frozen=True)
class ForecastFailure:
    error: str
    error_type: str
    success: bool = field(default=False, init=False)

    @classmethod
    def from_exception(cls, exc: ForecastError) -> "ForecastFailure":
        return cls(error=str(exc), error_type=type(exc).__name__)


ForecastOutcome = Union[ForecastResult, ForecastFailure]


def _validate_horizon(horizon: int) -> int:
    if isinstance(horizon, bool) or not isinstance(horizon, (int, np.integer)):
        raise InvalidHorizonError(f"Horizon must be an integer, got {horizon!r}")
    if not 1 <= horizon <= MAX_HORIZON:
        raise InvalidHorizonError(f"Horizon must be between 1 and {MAX_HORIZON}, got {horizon}")
    return int(horizon)


def _run_forecast(
    entries: Iterable[LedgerEntry],
    method: Union[str, ForecastMethod],
    horizon: int,
    options: ForecastOptions,
    deductions: Optional[DeductionsCollaborator],
    clock: Callable[[], datetime],
) -> ForecastResult:
    entries = list(entries)
    if not entries:
        raise EmptyInputError("No ledger entries supplied")

    requested = resolve_model(method, alpha=options.alpha, beta=options.beta, gamma=options.gamma)
    horizon = _validate_horizon(horizon)
    z_score_for(options.confidence_level)

    entries = filter_entries_by_period(entries, options.start, options.end)
    if not entries:
        raise EmptyInputError("No ledger entries fall inside the requested period range")

    historical = build_monthly_series(entries, options.include_withheld_amount, deductions)
    if len(historical) < MIN_HISTORY:
        raise InsufficientHistoryError(
            f"At least {MIN_HISTORY} months of data are required for a forecast, got {len(historical)}"
        )

    model, fallback_reason = effective_model(requested, len(historical))
    if fallback_reason:
        logger.warning(fallback_reason)

    values = np.array([point.value for point in historical], dtype=float)
    predicted = model.forecast(values, horizon)
    intervals = attach_confidence_intervals(values, predicted, options.confidence_level)

    last_period = historical[-1].period
    forecast = tuple(
        ForecastPoint(
            period=add_months(last_period, step),
            value=float(value),
            lower_bound=interval.lower,
            upper_bound=interval.upper,
            method=model.method,
            confidence_level=options.confidence_level,
        )
        for step, (value, interval) in enumerate(zip(predicted, intervals), start=1)
    )

    metrics = evaluate_accuracy(values, model)

    logger.info(
        f"Forecast {model.method.value}: {len(historical)} months of history, "
        f"{horizon} months ahead"
    )
    return ForecastResult(
        method=model.method,
        requested_method=requested.method,
        requested_horizon=horizon,
        historical=tuple(historical),
        forecast=forecast,
        metrics=metrics,
        fallback_reason=fallback_reason,
        generated_at=clock(),
    )


def generate_forecast(
    entries: Iterable[LedgerEntry],
    method: Union[str, ForecastMethod] = ForecastMethod.LINEAR,
    horizon: int = DEFAULT_HORIZON,
    options: Optional[ForecastOptions] = None,
    *,
    deductions: Optional[DeductionsCollaborator] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> ForecastOutcome:
    """
    Forecast monthly revenue from raw ledger entries.

    Predictable problems (no entries, short history, bad horizon, unknown
    method, out-of-range parameters) come back as a ``ForecastFailure``
    instead of raising.
    """
    if options is None:
        options = ForecastOptions()
    if clock is None:
        clock = _utc_now

    try:
        return _run_forecast(entries, method, horizon, options, deductions, clock)
    except ForecastError as exc:
        logger.warning(f"Forecast failed ({type(exc).__name__}): {exc}")
        return ForecastFailure.from_exception(exc)


def compare_all_methods(
    entries: Iterable[LedgerEntry],
    horizon: int = DEFAULT_HORIZON,
    options: Optional[ForecastOptions] = None,
    *,
    deductions: Optional[DeductionsCollaborator] = None,
) -> Dict[str, ForecastOutcome]:
    entries = list(entries)
    return {
        method.value: generate_forecast(entries, method, horizon, options, deductions=deductions)
        for method in ForecastMethod
    }


def summarize_forecast(result: ForecastResult) -> str:
    lines = [f"Method: {result.method.value}"]
    if result.fallback_reason:
        lines.append(f"Note: {result.fallback_reason}")

    last_actual = result.historical[-1].value
    first_forecast = result.forecast[0].value
    if last_actual > 0:
        change = (first_forecast - last_actual) / last_actual * 100
        if change > 5:
            lines.append(f"Revenue is expected to rise by {change:.1f}% next month.")
        elif change < -5:
            lines.append(f"Revenue is expected to fall by {abs(change):.1f}% next month.")
        else:
            lines.append(f"Revenue is expected to stay stable ({abs(change):.1f}% change).")

    mean_forecast = float(np.mean([point.value for point in result.forecast]))
    mean_width = float(np.mean([point.upper_bound - point.lower_bound for point in result.forecast]))
    confidence = int(round(result.forecast[0].confidence_level * 100))
    lines.append(f"Mean forecast over the next {len(result.forecast)} months: {mean_forecast:.2f}")
    lines.append(f"Mean interval width ({confidence}%): {mean_width:.2f}")

    if result.metrics.available:
        lines.append(
            f"Backtest over {result.metrics.validation_periods} months: "
            f"MAE={result.metrics.mae:.2f} RMSE={result.metrics.rmse:.2f} "
            f"MAPE={result.metrics.mape:.2f}% accuracy={result.metrics.accuracy:.1f}%"
        )
    else:
        lines.append(f"Accuracy unavailable: {result.metrics.message}")
    return "\n".join(lines)
