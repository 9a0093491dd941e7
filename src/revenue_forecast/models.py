from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import ClassVar, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import InsufficientHistoryError, InvalidParameterError, UnknownMethodError

logger = logging.getLogger(__name__)

SEASON_LENGTH = 12
HOLT_WINTERS_MIN_HISTORY = 2 * SEASON_LENGTH


class ForecastMethod(str, Enum):
    LINEAR = "linear"
    SEASONAL = "seasonal"
    HOLT_WINTERS = "holt-winters"

    @classmethod
    def parse(cls, raw: Union[str, "ForecastMethod"]) -> "ForecastMethod":
        if isinstance(raw, cls):
            return raw
        key = str(raw).strip().lower()
        if key == "holtwinters":
            key = cls.HOLT_WINTERS.value
        for member in cls:
            if member.value == key:
                return member
        supported = ", ".join(member.value for member in cls)
        raise UnknownMethodError(f"Unknown forecasting method {raw!r}; expected one of: {supported}")


# ---------------------------------------------------------------------------
# Linear trend
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LinearFit:
    slope: float
    intercept: float


def fit_linear_trend(values: Sequence[float]) -> LinearFit:
    y = np.asarray(values, dtype=float)
    n = y.size
    x = np.arange(n, dtype=float)

    sum_x = x.sum()
    sum_y = y.sum()
    sum_xy = (x * y).sum()
    sum_x2 = (x * x).sum()
    denom = n * sum_x2 - sum_x * sum_x
    if n < 2 or denom == 0:
        raise InsufficientHistoryError(
            f"Linear regression needs at least 2 data points, got {n}"
        )

    slope = (n * sum_xy - sum_x * sum_y) / denom
    intercept = sum_y / n - slope * (sum_x / n)
    return LinearFit(slope=float(slope), intercept=float(intercept))


def forecast_linear_trend(values: Sequence[float], horizon: int) -> np.ndarray:
    fit = fit_linear_trend(values)
    n = len(values)
    steps = np.arange(1, horizon + 1, dtype=float)
    predicted = fit.slope * (n + steps - 1) + fit.intercept
    logger.debug(f"Linear fit slope={fit.slope:.4f} intercept={fit.intercept:.4f}")
    return np.maximum(predicted, 0.0)


# ---------------------------------------------------------------------------
# Seasonal naive
# ---------------------------------------------------------------------------


def forecast_seasonal_naive(
    values: Sequence[float],
    horizon: int,
    season_length: int = SEASON_LENGTH,
) -> np.ndarray:
    history = np.asarray(values, dtype=float)
    if history.size == 0:
        raise InsufficientHistoryError("Seasonal naive forecast requires non-empty history.")
    if history.size < season_length:
        # Less than one full season: carry the last value forward.
        return np.maximum(np.full(horizon, history[-1]), 0.0)

    last_season = history[-season_length:]
    repeated = np.array([last_season[i % season_length] for i in range(horizon)], dtype=float)
    return np.maximum(repeated, 0.0)


# ---------------------------------------------------------------------------
# Holt-Winters (additive)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HoltWintersState:
    level: float
    trend: float
    seasonals: Tuple[float, ...]


def initialize_holt_winters(
    values: Sequence[float],
    season_length: int = SEASON_LENGTH,
) -> HoltWintersState:
    history = np.asarray(values, dtype=float)
    if history.size < 2 * season_length:
        raise InsufficientHistoryError(
            f"Holt-Winters needs at least {2 * season_length} data points, got {history.size}"
        )

    full_seasons = history.size // season_length
    seasons = history[: full_seasons * season_length].reshape(full_seasons, season_length)
    seasonals = seasons.mean(axis=0) - seasons.mean()

    return HoltWintersState(
        level=float(history[0]),
        trend=float((history[season_length] - history[0]) / season_length),
        seasonals=tuple(float(s) for s in seasonals),
    )


def holt_winters_step(
    state: HoltWintersState,
    value: float,
    season_index: int,
    alpha: float,
    beta: float,
    gamma: float,
) -> HoltWintersState:
    seasonal = state.seasonals[season_index]
    level = alpha * (value - seasonal) + (1 - alpha) * (state.level + state.trend)
    trend = beta * (level - state.level) + (1 - beta) * state.trend
    updated = gamma * (value - level) + (1 - gamma) * seasonal

    seasonals = list(state.seasonals)
    seasonals[season_index] = updated
    return replace(state, level=level, trend=trend, seasonals=tuple(seasonals))


def fit_holt_winters(
    values: Sequence[float],
    alpha: float,
    beta: float,
    gamma: float,
    season_length: int = SEASON_LENGTH,
) -> HoltWintersState:
    state = initialize_holt_winters(values, season_length)
    for i in range(1, len(values)):
        state = holt_winters_step(state, float(values[i]), i % season_length, alpha, beta, gamma)
    return state


def forecast_holt_winters(
    values: Sequence[float],
    horizon: int,
    alpha: float,
    beta: float,
    gamma: float,
    season_length: int = SEASON_LENGTH,
) -> np.ndarray:
    state = fit_holt_winters(values, alpha, beta, gamma, season_length)
    n = len(values)
    logger.debug(f"Holt-Winters final level={state.level:.4f} trend={state.trend:.4f}")

    predictions = []
    for step in range(1, horizon + 1):
        season_index = (n + step - 1) % season_length
        predictions.append(state.level + step * state.trend + state.seasonals[season_index])
    return np.maximum(np.asarray(predictions, dtype=float), 0.0)


# ---------------------------------------------------------------------------
# Method variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LinearTrend:
    method: ClassVar[ForecastMethod] = ForecastMethod.LINEAR

    def forecast(self, values: Sequence[float], horizon: int) -> np.ndarray:
        return forecast_linear_trend(values, horizon)


@dataclass(frozen=True)
class SeasonalNaive:
    method: ClassVar[ForecastMethod] = ForecastMethod.SEASONAL

    def forecast(self, values: Sequence[float], horizon: int) -> np.ndarray:
        return forecast_seasonal_naive(values, horizon)


@dataclass(frozen=True)
class HoltWinters:
    alpha: float = 0.2
    beta: float = 0.1
    gamma: float = 0.1

    method: ClassVar[ForecastMethod] = ForecastMethod.HOLT_WINTERS
    min_history: ClassVar[int] = HOLT_WINTERS_MIN_HISTORY

    def __post_init__(self) -> None:
        for name in ("alpha", "beta", "gamma"):
            value = getattr(self, name)
            if not 0.0 < value < 1.0:
                raise InvalidParameterError(f"{name} must lie strictly between 0 and 1, got {value}")

    def forecast(self, values: Sequence[float], horizon: int) -> np.ndarray:
        return forecast_holt_winters(values, horizon, self.alpha, self.beta, self.gamma)


ForecastModel = Union[LinearTrend, SeasonalNaive, HoltWinters]


def resolve_model(
    method: Union[str, ForecastMethod],
    alpha: float = 0.2,
    beta: float = 0.1,
    gamma: float = 0.1,
) -> ForecastModel:
    chosen = ForecastMethod.parse(method)
    if chosen is ForecastMethod.LINEAR:
        return LinearTrend()
    if chosen is ForecastMethod.SEASONAL:
        return SeasonalNaive()
    return HoltWinters(alpha=alpha, beta=beta, gamma=gamma)


def effective_model(model: ForecastModel, history_length: int) -> Tuple[ForecastModel, Optional[str]]:
    """Swap Holt-Winters for a linear trend when history is too short for two seasons."""
    if isinstance(model, HoltWinters) and history_length < model.min_history:
        reason = (
            f"Holt-Winters needs {model.min_history} months of history, got {history_length}; "
            "using linear regression instead"
        )
        return LinearTrend(), reason
    return model, None
