"""
test_metrics.py
---------------
Unit tests for the metrics and backtesting modules.
"""
import numpy as np
import pandas as pd
import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from stockcast.evaluation.metrics import (
    compute_all_metrics, interval_coverage, mae, mape, mean_interval_width, rmse, smape,
    summarize_folds,
)
from stockcast.evaluation.backtest import walk_forward_backtest, compare_models, BacktestResult
from stockcast.models.engine import ForecastingEngine


# ── Metric Tests ──────────────────────────────────────────────────────────────

class TestMetrics:
    def test_mae_perfect(self):
        y = np.array([1.0, 2.0, 3.0])
        assert mae(y, y) == pytest.approx(0.0)

    def test_mae_basic(self):
        y_true = np.array([1.0, 2.0, 3.0])
        y_pred = np.array([2.0, 3.0, 4.0])
        assert mae(y_true, y_pred) == pytest.approx(1.0)

    def test_rmse_basic(self):
        y_true = np.zeros(4)
        y_pred = np.full(4, 2.0)
        assert rmse(y_true, y_pred) == pytest.approx(2.0)

    def test_mape_no_zero_division(self):
        """MAPE should not divide by zero on zero-sales days."""
        result = mape(np.zeros(5), np.ones(5))
        assert np.isfinite(result)

    def test_smape_symmetric(self):
        a = np.array([1.0, 2.0, 5.0])
        b = np.array([2.0, 1.0, 3.0])
        assert smape(a, b) == pytest.approx(smape(b, a), rel=1e-5)

    def test_interval_coverage(self):
        y = np.array([1.0, 5.0, 10.0, 20.0])
        lower = np.array([0.0, 0.0, 0.0, 0.0])
        upper = np.array([2.0, 5.0, 9.0, 30.0])
        assert interval_coverage(y, lower, upper) == pytest.approx(75.0)

    def test_interval_coverage_empty(self):
        assert interval_coverage(np.array([]), np.array([]), np.array([])) == 0.0

    def test_smape_zero_day_scores_zero(self):
        assert smape([0.0, 4.0], [0.0, 4.0]) == pytest.approx(0.0)

    def test_shape_mismatch_raises(self):
        with pytest.raises(ValueError):
            mae([1.0, 2.0], [1.0])

    def test_mean_interval_width(self):
        assert mean_interval_width([0.0, 1.0], [2.0, 5.0]) == pytest.approx(3.0)

    def test_point_metrics_only_without_bounds(self):
        y = [1.0, 2.0, 3.0]
        assert set(compute_all_metrics(y, y)) == {"mae", "rmse", "mape", "smape"}

    def test_interval_metrics_with_bounds(self):
        actual = [4.0, 6.0, 12.0]
        scores = compute_all_metrics(actual, [5.0, 5.0, 5.0],
                                     lower=[3.0, 3.0, 3.0], upper=[7.0, 7.0, 7.0])
        assert scores["coverage"] == pytest.approx(200 / 3)
        assert scores["mean_width"] == pytest.approx(4.0)

    def test_summarize_folds(self):
        folds = [{"mae": 1.0, "rmse": 2.0}, {"mae": 3.0, "rmse": 4.0}]
        summary = summarize_folds(folds)
        assert list(summary["metric"]) == ["mae", "rmse"]
        mae_row = summary[summary["metric"] == "mae"].iloc[0]
        assert mae_row["mean"] == pytest.approx(2.0)
        assert mae_row["std"] == pytest.approx(1.0)
        assert mae_row["min"] == pytest.approx(1.0)

    def test_summarize_no_folds(self):
        assert summarize_folds([]).empty


# ── Backtesting Tests ─────────────────────────────────────────────────────────

def make_fake_df(n_items: int = 3, n_days: int = 60, seed: int = 0) -> pd.DataFrame:
    """Generate a minimal long-format sales DataFrame for testing."""
    rng = np.random.default_rng(seed)
    rows = []
    base = pd.Timestamp("2024-01-01")
    for item in range(n_items):
        for day in range(n_days):
            rows.append({
                "id": f"item_{item}",
                "date": base + pd.Timedelta(days=day),
                "sales": float(rng.poisson(5)),
            })
    return pd.DataFrame(rows)


class TestBacktest:
    @pytest.mark.parametrize("model", ["ma7", "ses", "arima", "sarima", "auto"])
    def test_backtest_returns_result(self, model):
        result = walk_forward_backtest(
            make_fake_df(), ForecastingEngine(), model=model,
            horizon=7, n_splits=2, min_train_days=21, verbose=False,
        )
        assert isinstance(result, BacktestResult)
        assert len(result.fold_results) == 2
        for fold in result.fold_results:
            assert {"mae", "rmse", "mape", "smape", "coverage", "mean_width"} <= set(fold)
            assert 0 <= fold["coverage"] <= 100

    def test_predictions_aligned(self):
        df = make_fake_df(n_items=2)
        result = walk_forward_backtest(
            df, ForecastingEngine(), model="arima",
            horizon=7, n_splits=1, min_train_days=21, verbose=False,
        )
        pred_df = result.predictions[0]
        assert len(pred_df) == 2 * 7
        assert not pred_df["prediction"].isna().any()
        assert (pred_df["lower"] <= pred_df["prediction"]).all()
        assert (pred_df["prediction"] <= pred_df["upper"]).all()

    def test_first_fold_trains_on_min_days(self):
        df = make_fake_df(n_items=1)
        result = walk_forward_backtest(
            df, ForecastingEngine(), model="ma7",
            horizon=7, n_splits=1, min_train_days=21, verbose=False,
        )
        first_test_date = result.predictions[0]["date"].min()
        assert first_test_date == pd.Timestamp("2024-01-22")

    def test_compare_models(self):
        r1 = BacktestResult("ModelA", fold_results=[{"mae": 1.0, "rmse": 1.5, "coverage": 90.0}])
        r2 = BacktestResult("ModelB", fold_results=[{"mae": 0.8, "rmse": 1.2, "coverage": 95.0}])
        lb = compare_models([r1, r2])
        assert lb.iloc[0]["model"] == "ModelB"
        assert "mae" in lb.columns

    def test_compare_models_empty(self):
        lb = compare_models([BacktestResult("Empty")])
        assert lb.empty

    def test_insufficient_data_raises(self):
        with pytest.raises(ValueError):
            walk_forward_backtest(
                make_fake_df(n_items=1, n_days=20), ForecastingEngine(), model="ses",
                horizon=7, n_splits=3, min_train_days=30, verbose=False,
            )
