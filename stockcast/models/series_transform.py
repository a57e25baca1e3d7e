"""
series_transform.py
-------------------
Numeric helpers shared by every forecaster: differencing, lag autocorrelation
and population statistics over a daily sales series.
"""

from __future__ import annotations
from typing import Sequence

import numpy as np


def _as_array(series: Sequence[float]) -> np.ndarray:
    return np.asarray(series, dtype=float)


def difference(series: Sequence[float], order: int = 1) -> np.ndarray:
    """
    Apply first differencing `order` times.

    Each pass shortens the series by one; asking for `order >= len(series)`
    yields an empty array rather than an error.
    """
    result = _as_array(series)
    for _ in range(order):
        if result.size < 2:
            return np.array([], dtype=float)
        result = np.diff(result)
    return result


def seasonal_difference(series: Sequence[float], period: int) -> np.ndarray:
    """x[i] - x[i - period] for i in [period, len)."""
    arr = _as_array(series)
    if arr.size <= period:
        return np.array([], dtype=float)
    return arr[period:] - arr[:-period]


def mean(series: Sequence[float]) -> float:
    arr = _as_array(series)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


def variance(series: Sequence[float]) -> float:
    """Population variance (divides by N)."""
    arr = _as_array(series)
    if arr.size == 0:
        return 0.0
    return float(np.mean((arr - arr.mean()) ** 2))


def std_dev(series: Sequence[float]) -> float:
    """Population standard deviation."""
    return float(np.sqrt(variance(series)))


def autocorrelation(series: Sequence[float], lag: int) -> float:
    """
    Lag autocorrelation of a series.

    Numerator sums the products of mean-centred values `lag` apart, the
    denominator sums the squared mean-centred values over the whole series.
    A constant (or empty) series has no variance and returns 0.0 instead of NaN.
    """
    arr = _as_array(series)
    if arr.size == 0:
        return 0.0
    centred = arr - arr.mean()
    denominator = float(np.sum(centred ** 2))
    if denominator == 0.0:
        return 0.0
    if lag >= arr.size:
        return 0.0
    numerator = float(np.sum(centred[: arr.size - lag] * centred[lag:]))
    return numerator / denominator
