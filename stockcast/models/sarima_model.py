"""
sarima_model.py
---------------
Seasonal extension of SimpleARIMA.

The seasonal model wraps an inner SimpleARIMA rather than subclassing it.
After training, `kind` says which path is active:

  ModelKind.BASE      series shorter than two seasonal periods; training and
                      prediction are delegated verbatim to the inner model.
  ModelKind.SEASONAL  seasonality is tested; when present, AR coefficients
                      are estimated on the seasonally differenced series and
                      each forecast is nudged towards the value observed one
                      period earlier.

The seasonal orders (P, D, Q) are carried in the model state only.
"""

from __future__ import annotations
import logging
from typing import Optional, Sequence

import numpy as np

from stockcast.models.arima_model import ModelKind, ModelState, SimpleARIMA
from stockcast.models.exceptions import NotTrainedError
from stockcast.models.series_transform import seasonal_difference

logger = logging.getLogger(__name__)

SEASONALITY_RATIO = 0.8
SEASONAL_WEIGHT = 0.3


class SeasonalARIMA:
    def __init__(self, p=1, d=1, q=1, P=1, D=0, Q=1, s=7):
        if s < 1:
            raise ValueError(f"seasonal period must be >= 1, got {s}")
        self.base = SimpleARIMA(p, d, q)
        self.P = P
        self.D = D
        self.Q = Q
        self.s = s
        self.kind: Optional[ModelKind] = None
        self.has_season = False

    @property
    def seasonal_order(self) -> tuple[int, int, int, int]:
        return (self.P, self.D, self.Q, self.s)

    @property
    def data(self) -> Optional[np.ndarray]:
        return self.base.data

    @property
    def is_trained(self) -> bool:
        return self.kind is not None

    @property
    def state(self) -> ModelState:
        inner = self.base.state
        return ModelState(
            kind=self.kind or ModelKind.SEASONAL,
            order=inner.order,
            phi=inner.phi,
            theta=inner.theta,
            n_obs=inner.n_obs,
            seasonal_order=self.seasonal_order,
            has_season=self.has_season,
        )

    def detect_seasonality(self, series: Sequence[float]) -> bool:
        """
        Seasonality is assumed when the mean absolute change between points one
        period apart is below 80% of the mean absolute day-to-day change.
        """
        arr = np.asarray(series, dtype=float)
        if arr.size < 2 * self.s:
            return False
        seasonal_change = np.mean(np.abs(arr[self.s:] - arr[: -self.s]))
        step_change = np.mean(np.abs(np.diff(arr)))
        return bool(seasonal_change < step_change * SEASONALITY_RATIO)

    def seasonal_difference(self, series: Sequence[float]) -> np.ndarray:
        return seasonal_difference(series, self.s)

    def train(self, series: Sequence[float]) -> "SeasonalARIMA":
        self.kind = None
        self.has_season = False
        if series is None or len(series) < 2 * self.s:
            logger.debug(
                f"Series shorter than 2x{self.s} points; using plain ARIMA{self.base.order}"
            )
            self.base.train(series)
            self.kind = ModelKind.BASE
            return self

        self.has_season = self.detect_seasonality(series)
        if self.has_season:
            self.base.fit_parameters(series, self.seasonal_difference(series))
        else:
            self.base.fit_parameters(series)
        self.kind = ModelKind.SEASONAL
        logger.debug(f"SARIMA trained on {len(series)} points (seasonal={self.has_season})")
        return self

    def predict(self, steps: int = 7) -> list[float]:
        if not self.is_trained:
            raise NotTrainedError("SARIMA")
        predictions = self.base.predict(steps)
        if self.kind is ModelKind.BASE:
            return predictions

        data = self.base.data
        n = data.size
        if self.has_season:
            recent = data[-1]
            for i in range(len(predictions)):
                historical = data[n - self.s + (n + i) % self.s]
                factor = historical / recent if recent > 0 else 1.0
                predictions[i] *= (1 - SEASONAL_WEIGHT) + SEASONAL_WEIGHT * factor

        return [round(max(0.0, float(p)), 2) for p in predictions]
