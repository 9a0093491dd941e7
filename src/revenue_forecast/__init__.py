"""Monthly revenue forecasting with linear trend, seasonal naive and Holt-Winters models."""

from .data import AmountsBreakdown, LedgerEntry, TimeSeriesPoint, build_monthly_series, load_ledger_csv
from .errors import (
    EmptyInputError,
    ForecastError,
    InsufficientHistoryError,
    InvalidHorizonError,
    InvalidParameterError,
    InvalidPeriodError,
    UnknownMethodError,
)
from .metrics import AccuracyMetrics
from .models import ForecastMethod, HoltWinters, LinearTrend, SeasonalNaive
from .periods import Period, add_months, compare_periods, format_period, parse_period
from .pipeline import (
    ForecastFailure,
    ForecastOptions,
    ForecastPoint,
    ForecastResult,
    compare_all_methods,
    generate_forecast,
    summarize_forecast,
)

__all__ = [
    "AccuracyMetrics",
    "AmountsBreakdown",
    "EmptyInputError",
    "ForecastError",
    "ForecastFailure",
    "ForecastMethod",
    "ForecastOptions",
    "ForecastPoint",
    "ForecastResult",
    "HoltWinters",
    "InsufficientHistoryError",
    "InvalidHorizonError",
    "InvalidParameterError",
    "InvalidPeriodError",
    "LedgerEntry",
    "LinearTrend",
    "Period",
    "SeasonalNaive",
    "TimeSeriesPoint",
    "UnknownMethodError",
    "add_months",
    "build_monthly_series",
    "compare_all_methods",
    "compare_periods",
    "format_period",
    "generate_forecast",
    "load_ledger_csv",
    "parse_period",
    "summarize_forecast",
]

__version__ = "0.1.0"
