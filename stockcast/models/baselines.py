"""baselines.py — Single-value baseline forecasts (moving average, SES)."""
from __future__ import annotations
from typing import Sequence

import numpy as np


def moving_average(series: Sequence[float], window: int = 7) -> float:
    """Trailing mean over `window` points; the last point when history is shorter."""
    arr = np.asarray(series, dtype=float)
    if arr.size == 0:
        return 0.0
    if arr.size < window:
        return float(arr[-1])
    return float(arr[-window:].mean())


def simple_exponential_smoothing(series: Sequence[float], alpha: float = 0.3) -> float:
    """
    Level of a simple exponential smoother initialised at the first point.

    Returns 0.0 for an empty series.
    """
    if not 0 < alpha <= 1:
        raise ValueError(f"alpha must be in (0, 1], got {alpha}")
    arr = np.asarray(series, dtype=float)
    if arr.size == 0:
        return 0.0
    level = arr[0]
    for value in arr[1:]:
        level = alpha * value + (1 - alpha) * level
    return float(level)
