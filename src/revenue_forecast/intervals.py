from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

import numpy as np

from .errors import InvalidParameterError

Z_SCORES: Dict[float, float] = {
    0.90: 1.645,
    0.95: 1.96,
    0.99: 2.576,
}


@dataclass(frozen=True)
class Interval:
    lower: float
    upper: float


def z_score_for(confidence_level: float) -> float:
    for level, z in Z_SCORES.items():
        if np.isclose(level, confidence_level):
            return z
    supported = ", ".join(f"{level:.2f}" for level in Z_SCORES)
    raise InvalidParameterError(
        f"Unsupported confidence level {confidence_level}; expected one of: {supported}"
    )


def attach_confidence_intervals(
    historical: Sequence[float],
    predicted: Sequence[float],
    confidence_level: float = 0.95,
) -> List[Interval]:
    """
    Bands widen with the square root of the step: ``z * sigma * sqrt(i + 1)``,
    sigma being the population standard deviation of the history.

    The lower bound is clamped at zero, so a band whose lower edge is clamped
    is narrower than ``2 * margin`` and widths are only non-decreasing across
    steps where no clamping happens.
    """
    z = z_score_for(confidence_level)
    sigma = float(np.std(np.asarray(historical, dtype=float))) if len(historical) else 0.0

    intervals: List[Interval] = []
    for i, value in enumerate(predicted):
        margin = z * sigma * np.sqrt(i + 1)
        intervals.append(Interval(lower=max(0.0, float(value - margin)), upper=float(value + margin)))
    return intervals
