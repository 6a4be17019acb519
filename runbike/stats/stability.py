"""Consistency scoring for a set of same-day, same-drill attempt values.

Two scores exist and they are not interchangeable:

* ``simple_stability`` compares people against each other on one day.
* ``weighted_stability`` tracks one person's days over time and also
  penalizes the spread between their best and worst attempt.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from runbike.core.constants import (
    SIMPLE_STD_DEV_WEIGHT,
    STABILITY_MAX,
    STABILITY_MIN,
    WEIGHTED_CV_PENALTY,
    WEIGHTED_CV_SHARE,
    WEIGHTED_RANGE_PENALTY,
    WEIGHTED_RANGE_SHARE,
)
from runbike.errors import EmptyGroupError


@dataclass(frozen=True)
class ValueSummary:
    """Basic statistics over a non-empty list of values."""

    avg: float
    best: float
    worst: float
    std_dev: float
    count: int

    @property
    def spread(self) -> float:
        return self.worst - self.best


def _clamp_score(score: float) -> float:
    return max(STABILITY_MIN, min(STABILITY_MAX, score))


def summarize_values(values: Sequence[float]) -> ValueSummary:
    """Compute mean, best (minimum), worst and population std dev.

    Raises:
        EmptyGroupError: If ``values`` is empty.
    """
    if not values:
        raise EmptyGroupError()
    count = len(values)
    avg = math.fsum(values) / count
    variance = math.fsum((v - avg) ** 2 for v in values) / count
    return ValueSummary(
        avg=avg,
        best=min(values),
        worst=max(values),
        std_dev=math.sqrt(variance),
        count=count,
    )


def simple_stability(values: Sequence[float]) -> float:
    """Score used by the cross-person daily comparison."""
    summary = summarize_values(values)
    return _clamp_score(STABILITY_MAX - summary.std_dev * SIMPLE_STD_DEV_WEIGHT)


def weighted_stability(values: Sequence[float]) -> float:
    """Score used by the single-person trend over time."""
    summary = summarize_values(values)
    cv = 0.0 if summary.avg == 0 else summary.std_dev / summary.avg
    score_cv = STABILITY_MAX - cv * WEIGHTED_CV_PENALTY
    score_range = STABILITY_MAX - summary.spread * WEIGHTED_RANGE_PENALTY
    return _clamp_score(
        score_cv * WEIGHTED_CV_SHARE + score_range * WEIGHTED_RANGE_SHARE
    )
