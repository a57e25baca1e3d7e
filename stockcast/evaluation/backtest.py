"""
backtest.py
-----------
Walk-forward (expanding-window) evaluation of ForecastingEngine strategies.

For each cutoff date every product is forecast from its history up to the
cutoff, and the next `horizon` days of actual sales are used for scoring.

                  Fold 1          Fold 2          Fold 3
Train:   [======]                [=========]     [============]
Predict:         [----h----]              [----h----]       [----h----]
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from stockcast.evaluation.metrics import (
    INTERVAL_METRICS, POINT_METRICS, compute_all_metrics, summarize_folds,
)
from stockcast.models.engine import ForecastingEngine

logger = logging.getLogger(__name__)


@dataclass
class BacktestResult:
    """Stores per-fold and aggregate backtesting results."""
    model_name: str
    fold_results: list[dict] = field(default_factory=list)
    predictions: list[pd.DataFrame] = field(default_factory=list)

    @property
    def summary(self) -> pd.DataFrame:
        return summarize_folds(self.fold_results)

    @property
    def mean_mae(self) -> float:
        return float(np.mean([r["mae"] for r in self.fold_results]))

    @property
    def mean_rmse(self) -> float:
        return float(np.mean([r["rmse"] for r in self.fold_results]))

    @property
    def mean_coverage(self) -> float:
        return float(np.mean([r["coverage"] for r in self.fold_results]))

    def __repr__(self) -> str:
        return (
            f"BacktestResult(model={self.model_name}, "
            f"folds={len(self.fold_results)}, "
            f"MAE={self.mean_mae:.3f}, RMSE={self.mean_rmse:.3f}, "
            f"coverage={self.mean_coverage:.1f}%)"
        )


def walk_forward_backtest(
    df: pd.DataFrame,
    engine: ForecastingEngine,
    model: str = "auto",
    date_col: str = "date",
    target_col: str = "sales",
    id_col: str = "id",
    horizon: int = 7,
    n_splits: int = 3,
    min_train_days: int = 21,
    verbose: bool = True,
) -> BacktestResult:
    """
    Run walk-forward cross-validation of one engine strategy.

    Args:
        df            : long-format dataframe with one row per product per day
        engine        : ForecastingEngine used for every fold
        model         : strategy name passed to forecast_with_confidence
        horizon       : forecast horizon in days
        n_splits      : number of walk-forward folds
        min_train_days: minimum history required before the first fold

    Returns:
        BacktestResult with per-fold metrics and predictions
    """
    df = df.sort_values([id_col, date_col]).copy()
    all_dates = sorted(df[date_col].unique())
    result = BacktestResult(model_name=model.upper())

    total_usable = len(all_dates) - horizon - min_train_days
    fold_size = max(1, total_usable // n_splits)

    cutoffs = []
    for i in range(n_splits):
        idx = min_train_days + i * fold_size - 1
        if 0 <= idx < len(all_dates) - horizon:
            cutoffs.append(all_dates[idx])

    if not cutoffs:
        raise ValueError(
            f"Not enough data for {n_splits} folds with min_train_days={min_train_days}. "
            f"Total dates: {len(all_dates)}"
        )

    for fold_num, cutoff in enumerate(cutoffs, 1):
        train_df = df[df[date_col] <= cutoff]
        test_end = pd.Timestamp(cutoff) + pd.Timedelta(days=horizon)
        test_df = df[(df[date_col] > cutoff) & (df[date_col] <= test_end)]

        fold_preds = []
        for item_id, test_rows in test_df.groupby(id_col, sort=False):
            history = train_df.loc[train_df[id_col] == item_id, target_col].tolist()
            n = len(test_rows)
            fc = engine.forecast_with_confidence(history, steps=n, model=model)
            out = test_rows[[id_col, date_col, target_col]].copy()
            out["prediction"] = fc.predictions[:n]
            out["lower"] = [ci.lower for ci in fc.confidence_intervals[:n]]
            out["upper"] = [ci.upper for ci in fc.confidence_intervals[:n]]
            out["fold"] = fold_num
            fold_preds.append(out)

        if not fold_preds:
            continue
        pred_df = pd.concat(fold_preds, ignore_index=True)
        metrics = compute_all_metrics(
            pred_df[target_col].values, pred_df["prediction"].values,
            lower=pred_df["lower"].values, upper=pred_df["upper"].values,
        )
        result.fold_results.append(metrics)
        result.predictions.append(pred_df)

        if verbose:
            logger.info(
                f"  [{result.model_name}] fold {fold_num}/{len(cutoffs)} "
                f"cutoff={pd.Timestamp(cutoff).date()} "
                f"MAE={metrics['mae']:.3f} RMSE={metrics['rmse']:.3f} "
                f"coverage={metrics['coverage']:.1f}%"
            )

    return result


def compare_models(results: list[BacktestResult]) -> pd.DataFrame:
    """Leaderboard of backtest results, best (lowest MAE) first."""
    rows = []
    for r in results:
        if not r.fold_results:
            continue
        folds = pd.DataFrame(r.fold_results)
        row = {"model": r.model_name, "folds": len(folds)}
        row.update(folds.mean().to_dict())
        rows.append(row)
    if not rows:
        return pd.DataFrame(columns=["model", "folds", *POINT_METRICS, *INTERVAL_METRICS])
    return pd.DataFrame(rows).sort_values("mae").reset_index(drop=True)
