"""Outlier cleaning for rest durations: Tukey fence with median replacement.

Rest between sets of the same exercise is the meaningful quantity, so cleaning
runs per (workout, exercise) group. The functions here are pure; the duration
service feeds them the raw column and writes the result back.

Method:
- fewer than OUTLIER_MIN_SAMPLES values: copied through unchanged
- Q1 / Q3 are order statistics at floor(n*0.25) / floor(n*0.75) of the sorted sample
- fence = [max(floor, Q1 - 1.5*IQR), min(ceiling, Q3 + 1.5*IQR)]
- values outside the fence are replaced by the rounded median of the full sample
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from training_tracker.core.constants import (
    IQR_MULTIPLIER,
    OUTLIER_MIN_SAMPLES,
    SCHEDULED_MAX_REST_SECONDS,
    SCHEDULED_MIN_REST_SECONDS,
)


@dataclass(frozen=True, slots=True)
class CleaningBounds:
    """Hard limits applied on top of the IQR fence. ceiling=None means uncapped."""

    floor: float = 0
    ceiling: float | None = None


UNCAPPED = CleaningBounds(floor=0, ceiling=None)
SCHEDULED = CleaningBounds(floor=SCHEDULED_MIN_REST_SECONDS, ceiling=SCHEDULED_MAX_REST_SECONDS)


@dataclass(frozen=True, slots=True)
class Fence:
    q1: float
    q3: float
    lower: float
    upper: float
    median: float

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper


@dataclass(slots=True)
class CleaningResult:
    """Cleaned values in the same order as the input, plus how many were replaced."""

    cleaned: list[int]
    outliers: int = 0
    fence: Fence | None = None


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (31.5 -> 32), unlike round()."""
    return int(math.floor(value + 0.5))


def median(sorted_values: list[float]) -> float:
    n = len(sorted_values)
    if n == 0:
        raise ValueError("median of empty sample")
    mid = n // 2
    if n % 2 == 0:
        return (sorted_values[mid - 1] + sorted_values[mid]) / 2
    return sorted_values[mid]


def compute_fence(values: list[float], bounds: CleaningBounds = UNCAPPED) -> Fence:
    """IQR fence for a sample (any order). Quartiles are order statistics, not interpolated."""
    ordered = sorted(values)
    n = len(ordered)
    if n == 0:
        raise ValueError("fence of empty sample")
    q1 = ordered[math.floor(n * 0.25)]
    q3 = ordered[math.floor(n * 0.75)]
    iqr = q3 - q1
    lower = max(bounds.floor, q1 - IQR_MULTIPLIER * iqr)
    upper = q3 + IQR_MULTIPLIER * iqr
    if bounds.ceiling is not None:
        upper = min(bounds.ceiling, upper)
    return Fence(q1=q1, q3=q3, lower=lower, upper=upper, median=median(ordered))


def clean_durations(values: list[int], bounds: CleaningBounds = UNCAPPED) -> CleaningResult:
    """Replace outliers by the rounded median. Output order matches input order."""
    if len(values) < OUTLIER_MIN_SAMPLES:
        return CleaningResult(cleaned=list(values))

    fence = compute_fence(values, bounds)
    replacement = round_half_up(fence.median)
    cleaned: list[int] = []
    outliers = 0
    for value in values:
        if fence.contains(value):
            cleaned.append(value)
        else:
            cleaned.append(replacement)
            outliers += 1
    return CleaningResult(cleaned=cleaned, outliers=outliers, fence=fence)
