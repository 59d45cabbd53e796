"""Pearson correlation between daily series.

Correlation never raises on sparse or flat data: fewer than two points or a
constant series yields None ("no correlation can be inferred").
"""

import math
from collections.abc import Sequence
from typing import Any

import numpy as np
from pydantic import BaseModel
from scipy import stats as sp_stats

MIN_POINTS = 2

# Standard deviation below which a series counts as constant
CONSTANT_STD = 1e-10


class CorrelationResult(BaseModel):
    r: float
    p_value: float
    n: int


def correlate(a: Sequence[float], b: Sequence[float]) -> CorrelationResult | None:
    """Pearson r with its two-sided p-value.

    Args:
        a: First series.
        b: Second series, paired with ``a`` index by index.

    Returns:
        The correlation, or None when it is undefined.

    Raises:
        ValueError: The series differ in length or are not one-dimensional.
    """
    x = np.asarray(a, dtype=float)
    y = np.asarray(b, dtype=float)

    if x.ndim != 1 or y.ndim != 1:
        raise ValueError("series must be one-dimensional")
    if len(x) != len(y):
        raise ValueError(f"series lengths differ: {len(x)} != {len(y)}")

    n = len(x)
    if n < MIN_POINTS:
        return None

    # Skip constant arrays (all same value -> no correlation)
    if np.std(x) < CONSTANT_STD or np.std(y) < CONSTANT_STD:
        return None

    r, p = sp_stats.pearsonr(x, y)
    if not math.isfinite(r):
        return None

    return CorrelationResult(r=float(np.clip(r, -1.0, 1.0)), p_value=float(p), n=n)


def pearson(a: Sequence[float], b: Sequence[float]) -> float | None:
    """Pearson r in [-1, 1], or None when either series has zero variance."""
    result = correlate(a, b)
    return result.r if result else None


def pair_by_position(
    left: Sequence[Any], right: Sequence[Any], left_field: str, right_field: str
) -> tuple[list[float], list[float]]:
    """Pair records index by index, truncated to the shorter window.

    Records logged on different days end up paired with each other.
    """
    pairs = list(zip(left, right))
    return (
        [float(getattr(left_record, left_field)) for left_record, _ in pairs],
        [float(getattr(right_record, right_field)) for _, right_record in pairs],
    )


def pair_by_date(
    left: Sequence[Any], right: Sequence[Any], left_field: str, right_field: str
) -> tuple[list[float], list[float]]:
    """Pair records logged on the same date, most recent first."""
    right_by_date = {record.date: record for record in right}

    xs: list[float] = []
    ys: list[float] = []
    for record in sorted(left, key=lambda log: log.date, reverse=True):
        match = right_by_date.get(record.date)
        if match is None:
            continue
        xs.append(float(getattr(record, left_field)))
        ys.append(float(getattr(match, right_field)))

    return xs, ys
