"""
test_models.py
--------------
Unit tests for SimpleARIMA and SeasonalARIMA.
"""
import numpy as np
import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from stockcast.models.arima_model import ModelKind, SimpleARIMA
from stockcast.models.exceptions import InsufficientDataError, NotTrainedError
from stockcast.models.sarima_model import SeasonalARIMA

SAMPLE = [10, 12, 11, 13, 12, 14, 13, 15, 14, 16]
WEEKLY = [1, 5, 9, 3, 7, 2, 8] * 3


# ── SimpleARIMA ───────────────────────────────────────────────────────────────

class TestSimpleARIMA:
    def test_predict_length_and_non_negative(self):
        preds = SimpleARIMA(1, 1, 1).train(SAMPLE).predict(7)
        assert len(preds) == 7
        assert all(p >= 0 for p in preds)

    @pytest.mark.parametrize("n", [0, 1, 5, 9])
    def test_short_series_raises(self, n):
        with pytest.raises(InsufficientDataError):
            SimpleARIMA().train(list(range(n)))

    def test_insufficient_data_is_value_error(self):
        with pytest.raises(ValueError):
            SimpleARIMA().train([1, 2, 3])

    def test_none_series_raises(self):
        with pytest.raises(InsufficientDataError):
            SimpleARIMA().train(None)

    def test_predict_before_train_raises(self):
        with pytest.raises(NotTrainedError):
            SimpleARIMA().predict(3)

    def test_coefficient_lengths(self):
        model = SimpleARIMA(p=3, d=1, q=2).train(np.random.rand(30) * 10)
        assert len(model.phi) == 3
        assert len(model.theta) == 2

    def test_theta_heuristic(self):
        model = SimpleARIMA(p=1, d=1, q=3).train(SAMPLE)
        assert model.theta == pytest.approx([0.3, 0.15, 0.1])

    def test_linear_series_follows_trend(self):
        """Constant differences give phi=0, leaving only the trend term."""
        series = list(range(1, 11))
        model = SimpleARIMA(1, 1, 1).train(series)
        assert model.phi == [0.0]
        assert model.predict(3) == pytest.approx([0.9, 1.8, 2.7])

    def test_constant_series_tolerated(self):
        preds = SimpleARIMA().train([5.0] * 10).predict(3)
        assert all(np.isfinite(p) for p in preds)

    def test_negative_path_is_clamped(self):
        # Alternating differences give a strongly negative phi
        preds = SimpleARIMA().train(SAMPLE).predict(5)
        assert min(preds) >= 0

    def test_steps_must_be_positive(self):
        model = SimpleARIMA().train(SAMPLE)
        with pytest.raises(ValueError):
            model.predict(0)

    def test_retrain_replaces_state(self):
        model = SimpleARIMA().train(SAMPLE)
        model.train(list(range(1, 11)))
        assert model.state.n_obs == 10
        assert model.phi == [0.0]

    def test_failed_retrain_discards_previous_fit(self):
        model = SimpleARIMA().train(SAMPLE)
        with pytest.raises(InsufficientDataError):
            model.train([1, 2, 3])
        assert not model.is_trained
        assert model.phi == [] and model.theta == []
        with pytest.raises(NotTrainedError):
            model.predict(2)

    def test_state_snapshot(self):
        state = SimpleARIMA(2, 1, 1).train(SAMPLE).state
        assert state.kind is ModelKind.BASE
        assert state.order == (2, 1, 1)
        assert len(state.phi) == 2
        assert state.to_dict()["kind"] == "arima"

    def test_negative_order_rejected(self):
        with pytest.raises(ValueError):
            SimpleARIMA(-1, 1, 1)


# ── SeasonalARIMA ─────────────────────────────────────────────────────────────

class TestSeasonalARIMA:
    def test_short_series_matches_base_model(self):
        series = [4, 6, 5, 7, 6, 8, 7, 9, 8, 10, 9, 11]   # 12 < 2*7
        seasonal = SeasonalARIMA(1, 1, 1, 1, 0, 1, s=7).train(series)
        base = SimpleARIMA(1, 1, 1).train(series)
        assert seasonal.kind is ModelKind.BASE
        assert seasonal.predict(7) == base.predict(7)

    def test_short_series_below_minimum_raises(self):
        with pytest.raises(InsufficientDataError):
            SeasonalARIMA(s=7).train([1, 2, 3, 4, 5])

    def test_predict_before_train_raises(self):
        with pytest.raises(NotTrainedError):
            SeasonalARIMA().predict(3)

    def test_detects_weekly_pattern(self):
        assert SeasonalARIMA(s=7).detect_seasonality(WEEKLY)

    def test_no_seasonality_on_linear_trend(self):
        assert not SeasonalARIMA(s=7).detect_seasonality(list(range(1, 22)))

    def test_detection_needs_two_periods(self):
        assert not SeasonalARIMA(s=7).detect_seasonality(WEEKLY[:13])

    def test_seasonal_adjustment(self):
        # Seasonal differences are all zero, so phi=0 and trend=(8-1)/21.
        model = SeasonalARIMA(s=7).train(WEEKLY)
        assert model.has_season
        assert model.kind is ModelKind.SEASONAL
        preds = model.predict(2)
        assert preds[0] == pytest.approx(0.25)   # (1/3) * (0.7 + 0.3 * 1/8)
        assert preds[1] == pytest.approx(0.59)   # (2/3) * (0.7 + 0.3 * 5/8)

    def test_non_seasonal_long_series_is_rounded_base(self):
        series = list(range(1, 22))
        model = SeasonalARIMA(s=7).train(series)
        assert not model.has_season
        expected = [round(p, 2) for p in SimpleARIMA().train(series).predict(4)]
        assert model.predict(4) == expected

    def test_zero_recent_value_uses_unit_factor(self):
        series = [1, 5, 9, 3, 7, 2, 0] * 3
        preds = SeasonalARIMA(s=7).train(series).predict(7)
        assert len(preds) == 7
        assert all(p >= 0 and np.isfinite(p) for p in preds)

    def test_predictions_rounded_and_non_negative(self):
        rng = np.random.default_rng(0)
        series = (10 + 3 * np.sin(np.arange(42) * 2 * np.pi / 7) + rng.normal(0, 0.3, 42)).tolist()
        preds = SeasonalARIMA(s=7).train(series).predict(10)
        assert len(preds) == 10
        assert all(p >= 0 for p in preds)
        assert all(p == round(p, 2) for p in preds)

    def test_state_carries_seasonal_order(self):
        state = SeasonalARIMA(1, 1, 1, 1, 0, 1, s=7).train(WEEKLY).state
        assert state.seasonal_order == (1, 0, 1, 7)
        assert state.has_season
        assert len(state.theta) == 1

    def test_failed_retrain_discards_previous_fit(self):
        model = SeasonalARIMA(s=7).train(WEEKLY)
        with pytest.raises(InsufficientDataError):
            model.train([1, 2, 3])
        assert not model.is_trained
        with pytest.raises(NotTrainedError):
            model.predict(2)

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            SeasonalARIMA(s=0)
