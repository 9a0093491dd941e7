from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd
from sklearn.metrics import mean_absolute_error, mean_squared_error


@dataclass(frozen=True)
class AccuracyMetrics:
    available: bool
    mae: float = 0.0
    rmse: float = 0.0
    mape: float = 0.0
    accuracy: float = 0.0
    validation_periods: int = 0
    message: Optional[str] = None

    @classmethod
    def unavailable(cls, message: str) -> "AccuracyMetrics":
        return cls(available=False, message=message)


def mae(actual: pd.Series | np.ndarray, predicted: pd.Series | np.ndarray) -> float:
    return float(mean_absolute_error(np.asarray(actual, dtype=float), np.asarray(predicted, dtype=float)))


def rmse(actual: pd.Series | np.ndarray, predicted: pd.Series | np.ndarray) -> float:
    mse = mean_squared_error(np.asarray(actual, dtype=float), np.asarray(predicted, dtype=float))
    return float(np.sqrt(mse))


def mape(actual: pd.Series | np.ndarray, predicted: pd.Series | np.ndarray) -> float:
    actual_arr = np.asarray(actual, dtype=float)
    predicted_arr = np.asarray(predicted, dtype=float)
    # Zero actuals are skipped rather than counted as infinite error.
    mask = actual_arr != 0
    if not mask.any():
        return 0.0
    pct = np.abs(actual_arr[mask] - predicted_arr[mask]) / np.abs(actual_arr[mask])
    return float(pct.mean() * 100)
