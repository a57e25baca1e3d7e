"""
metrics.py
----------
Scores for a backtest fold: point accuracy of the daily forecasts and
calibration of the engine's confidence bands.

Point metrics floor the denominator at one unit so zero-sales days do not
blow up the percentage errors.
"""

from __future__ import annotations
from typing import Optional, Sequence

import numpy as np
import pandas as pd

POINT_METRICS = ("mae", "rmse", "mape", "smape")
INTERVAL_METRICS = ("coverage", "mean_width")


def _errors(actual: Sequence[float], forecast: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
    actual = np.asarray(actual, dtype=float)
    forecast = np.asarray(forecast, dtype=float)
    if actual.shape != forecast.shape:
        raise ValueError(f"shape mismatch: {actual.shape} actuals vs {forecast.shape} forecasts")
    return actual, forecast - actual


def mae(actual, forecast) -> float:
    _, err = _errors(actual, forecast)
    return float(np.abs(err).mean()) if err.size else 0.0


def rmse(actual, forecast) -> float:
    _, err = _errors(actual, forecast)
    return float(np.sqrt((err ** 2).mean())) if err.size else 0.0


def mape(actual, forecast, min_units: float = 1.0) -> float:
    """Percentage error against actual sales, never dividing by less than `min_units`."""
    y, err = _errors(actual, forecast)
    if not err.size:
        return 0.0
    return float(100.0 * (np.abs(err) / np.maximum(np.abs(y), min_units)).mean())


def smape(actual, forecast) -> float:
    """Symmetric percentage error in [0, 200]; a day with zero actual and zero forecast scores 0."""
    y, err = _errors(actual, forecast)
    if not err.size:
        return 0.0
    scale = (np.abs(y) + np.abs(y + err)) / 2
    ratio = np.divide(np.abs(err), scale, out=np.zeros_like(scale), where=scale > 0)
    return float(100.0 * ratio.mean())


def interval_coverage(actual, lower, upper) -> float:
    """Share of actual sales falling inside [lower, upper], in percent."""
    y = np.asarray(actual, dtype=float)
    if y.size == 0:
        return 0.0
    inside = (y >= np.asarray(lower, dtype=float)) & (y <= np.asarray(upper, dtype=float))
    return float(100.0 * inside.mean())


def mean_interval_width(lower, upper) -> float:
    width = np.asarray(upper, dtype=float) - np.asarray(lower, dtype=float)
    return float(width.mean()) if width.size else 0.0


def compute_all_metrics(
    actual: Sequence[float],
    forecast: Sequence[float],
    lower: Optional[Sequence[float]] = None,
    upper: Optional[Sequence[float]] = None,
) -> dict[str, float]:
    """
    Point metrics for every fold; coverage and mean band width as well when
    the confidence bounds are supplied.
    """
    scores = {
        "mae": mae(actual, forecast),
        "rmse": rmse(actual, forecast),
        "mape": mape(actual, forecast),
        "smape": smape(actual, forecast),
    }
    if lower is not None and upper is not None:
        scores["coverage"] = interval_coverage(actual, lower, upper)
        scores["mean_width"] = mean_interval_width(lower, upper)
    return scores


def summarize_folds(fold_results: list[dict]) -> pd.DataFrame:
    """One row per metric with its mean, spread and range across folds."""
    folds = pd.DataFrame(fold_results)
    if folds.empty:
        return pd.DataFrame(columns=["metric", "mean", "std", "min", "max"])
    stats = folds.agg(["mean", "std", "min", "max"]).T
    stats["std"] = folds.std(ddof=0)
    return stats.rename_axis("metric").reset_index()
