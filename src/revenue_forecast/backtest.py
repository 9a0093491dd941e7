from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from .metrics import AccuracyMetrics, mae, mape, rmse
from .models import ForecastModel, effective_model

logger = logging.getLogger(__name__)

MIN_EVALUATION_HISTORY = 3
MAX_VALIDATION_PERIODS = 3
VALIDATION_FRACTION = 0.2


def validation_size(history_length: int) -> int:
    """Size of the held-out tail; 0 when the history is too short to split."""
    if history_length < MIN_EVALUATION_HISTORY:
        return 0
    size = min(MAX_VALIDATION_PERIODS, int(np.floor(VALIDATION_FRACTION * history_length)))
    return max(1, size)


def evaluate_accuracy(values: Sequence[float], model: ForecastModel) -> AccuracyMetrics:
    """
    Hold out the most recent points, refit ``model`` on the rest and score it.

    The model is re-run on the truncated history; Holt-Winters falls back to a
    linear trend there too when the truncated history is under two seasons.
    """
    history = np.asarray(values, dtype=float)
    n = history.size
    size = validation_size(n)
    if size == 0:
        return AccuracyMetrics.unavailable(
            f"At least {MIN_EVALUATION_HISTORY} months of history are needed to score accuracy, got {n}"
        )

    train = history[: n - size]
    actual = history[n - size :]
    scoring_model, fallback_reason = effective_model(model, train.size)
    if fallback_reason:
        logger.debug(f"Accuracy evaluation: {fallback_reason}")

    predicted = scoring_model.forecast(train, size)
    mape_value = mape(actual, predicted)
    return AccuracyMetrics(
        available=True,
        mae=mae(actual, predicted),
        rmse=rmse(actual, predicted),
        mape=mape_value,
        accuracy=max(0.0, 100.0 - mape_value),
        validation_periods=size,
    )
