from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from .data import load_ledger_csv
from .models import ForecastMethod
from .periods import Period, parse_period
from .pipeline import (
    DEFAULT_HORIZON,
    ForecastOptions,
    ForecastOutcome,
    ForecastResult,
    compare_all_methods,
    generate_forecast,
    summarize_forecast,
)


def parse_period_argument(raw: str) -> Period:
    try:
        return parse_period(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def summarize_comparison(outcomes: Dict[str, ForecastOutcome]) -> str:
    rows = []
    for method, outcome in outcomes.items():
        if not outcome.success:
            rows.append({"method": method, "used": "", "mae": float("nan"), "rmse": float("nan"),
                         "mape": float("nan"), "error": outcome.error})
            continue
        metrics = outcome.metrics
        rows.append(
            {
                "method": method,
                "used": outcome.method.value,
                "mae": metrics.mae if metrics.available else float("nan"),
                "rmse": metrics.rmse if metrics.available else float("nan"),
                "mape": metrics.mape if metrics.available else float("nan"),
                "error": "",
            }
        )
    table = pd.DataFrame.from_records(rows)
    return "Method comparison (lower is better):\n" + table.to_string(
        index=False, float_format=lambda x: f"{x:.2f}"
    )


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Monthly revenue forecasting with linear trend, seasonal naive, and Holt-Winters.",
    )
    parser.add_argument(
        "--ledger-path",
        type=Path,
        required=True,
        help="Path to the ledger CSV (columns: date as MM/YYYY, amount, optional withholding, other_deductions).",
    )
    parser.add_argument(
        "--method",
        choices=[method.value for method in ForecastMethod],
        default=ForecastMethod.LINEAR.value,
        help="Forecasting method (default: linear).",
    )
    parser.add_argument(
        "--horizon",
        type=int,
        default=DEFAULT_HORIZON,
        help=f"Number of future months to forecast, 1-12 (default: {DEFAULT_HORIZON}).",
    )
    parser.add_argument(
        "--include-withheld",
        action="store_true",
        help="Sum amounts gross of withholding instead of net.",
    )
    parser.add_argument("--start", type=parse_period_argument, help="First month to include (MM/YYYY).")
    parser.add_argument("--end", type=parse_period_argument, help="Last month to include (MM/YYYY).")
    parser.add_argument("--alpha", type=float, default=0.2, help="Holt-Winters level smoothing (default: 0.2).")
    parser.add_argument("--beta", type=float, default=0.1, help="Holt-Winters trend smoothing (default: 0.1).")
    parser.add_argument("--gamma", type=float, default=0.1, help="Holt-Winters seasonal smoothing (default: 0.1).")
    parser.add_argument(
        "--confidence-level",
        type=float,
        default=0.95,
        help="Confidence level of the prediction interval: 0.90, 0.95 or 0.99 (default: 0.95).",
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Run all three methods and print their backtest accuracy side by side.",
    )
    parser.add_argument(
        "--forecast-output",
        type=Path,
        help="Optional path to write historical and forecast rows as CSV.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    entries = load_ledger_csv(args.ledger_path)
    options = ForecastOptions(
        include_withheld_amount=args.include_withheld,
        alpha=args.alpha,
        beta=args.beta,
        gamma=args.gamma,
        confidence_level=args.confidence_level,
        start=args.start,
        end=args.end,
    )

    if args.compare:
        print(summarize_comparison(compare_all_methods(entries, args.horizon, options)))
        print()

    outcome = generate_forecast(entries, args.method, args.horizon, options)
    if not isinstance(outcome, ForecastResult):
        print(f"Forecast failed: {outcome.error}")
        return 1

    print(summarize_forecast(outcome))
    frame = outcome.to_frame()
    print("\nForecast:")
    print(
        frame[frame["kind"] == "forecast"]
        .drop(columns=["kind", "observation_count"])
        .to_string(index=False, float_format=lambda x: f"{x:.2f}")
    )

    if args.forecast_output:
        frame.to_csv(args.forecast_output, index=False)
        print(f"\nSaved forecast to {args.forecast_output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
