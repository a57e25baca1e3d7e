"""
arima_model.py
--------------
Lightweight ARIMA-style forecaster for daily product sales.

Parameters are estimated with closed-form heuristics rather than maximum
likelihood:
  - AR coefficients phi[k] are the lag-(k+1) autocorrelations of the
    d-times differenced series (a crude stand-in for Yule-Walker).
  - MA coefficients theta[k] are fixed at 0.3 / (k+1). They are reported in
    the model state but do not enter the point forecast.

Forecasts combine the AR terms, applied to the most recent observed/forecast
values, with a linear trend taken from the first and last training points.
"""

from __future__ import annotations
import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from stockcast.models.exceptions import InsufficientDataError, NotTrainedError
from stockcast.models.series_transform import autocorrelation, difference

logger = logging.getLogger(__name__)

MIN_TRAIN_POINTS = 10


class ModelKind(str, Enum):
    BASE = "arima"
    SEASONAL = "sarima"


@dataclass(frozen=True)
class ModelState:
    """Snapshot of a trained model's orders and estimated coefficients."""
    kind: ModelKind
    order: tuple[int, int, int]
    phi: tuple[float, ...] = ()
    theta: tuple[float, ...] = ()
    n_obs: int = 0
    seasonal_order: Optional[tuple[int, int, int, int]] = None
    has_season: bool = False

    def to_dict(self) -> dict:
        d = asdict(self)
        d["kind"] = self.kind.value
        return d


class SimpleARIMA:
    def __init__(self, p: int = 1, d: int = 1, q: int = 1):
        if min(p, d, q) < 0:
            raise ValueError(f"ARIMA orders must be non-negative, got ({p},{d},{q})")
        self.p = p
        self.d = d
        self.q = q
        self.phi: list[float] = []
        self.theta: list[float] = []
        self.data: Optional[np.ndarray] = None

    @property
    def order(self) -> tuple[int, int, int]:
        return (self.p, self.d, self.q)

    @property
    def is_trained(self) -> bool:
        return self.data is not None

    @property
    def state(self) -> ModelState:
        return ModelState(
            kind=ModelKind.BASE,
            order=self.order,
            phi=tuple(self.phi),
            theta=tuple(self.theta),
            n_obs=0 if self.data is None else int(self.data.size),
        )

    def estimate_parameters(self, series: Sequence[float]) -> None:
        diffed = difference(series, self.d)
        self.phi = [autocorrelation(diffed, lag) for lag in range(1, self.p + 1)]
        # Placeholder MA terms, not used by predict().
        self.theta = [0.3 / lag for lag in range(1, self.q + 1)]

    def fit_parameters(
        self,
        series: Sequence[float],
        estimation_series: Optional[Sequence[float]] = None,
    ) -> "SimpleARIMA":
        """
        Store `series` as the training history and estimate coefficients from
        `estimation_series` (defaults to `series`). Skips the minimum-length
        check done by train(); callers that transform the series first (e.g.
        seasonal differencing) use this directly.
        """
        self.data = np.asarray(series, dtype=float)
        self.estimate_parameters(self.data if estimation_series is None else estimation_series)
        logger.debug(f"ARIMA{self.order} fitted on {self.data.size} points: phi={self.phi}")
        return self

    def train(self, series: Sequence[float]) -> "SimpleARIMA":
        # A failed retrain leaves the model untrained, not holding the old fit.
        self.data = None
        self.phi = []
        self.theta = []
        if series is None or len(series) < MIN_TRAIN_POINTS:
            raise InsufficientDataError(
                MIN_TRAIN_POINTS, 0 if series is None else len(series), model="ARIMA"
            )
        return self.fit_parameters(series)

    def predict(self, steps: int = 7) -> list[float]:
        if not self.is_trained:
            raise NotTrainedError("ARIMA")
        if steps < 1:
            raise ValueError(f"steps must be >= 1, got {steps}")

        data = self.data
        window = max(self.p, self.q, 1)
        history = [float(v) for v in data[-window:]]
        trend = (data[-1] - data[0]) / data.size

        predictions = []
        for i in range(steps):
            forecast = 0.0
            for j in range(min(self.p, len(history))):
                forecast += self.phi[j] * history[-1 - j]
            forecast += trend * (i + 1)
            predictions.append(max(0.0, float(forecast)))
            # The buffer keeps the raw value so later AR terms see the unclamped path.
            history.append(float(forecast))
        return predictions
