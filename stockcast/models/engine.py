"""
engine.py
---------
ForecastingEngine: picks a forecasting strategy for a product's daily sales
series, runs it with fallbacks and attaches confidence intervals.

Strategies (keyed by name):
  ma7     trailing moving average (7 days unless `ma_window` says otherwise),
          repeated over the horizon; the tag stays "MA7" whatever the window
  ses     simple exponential smoothing (alpha=0.3), repeated over the horizon
  arima   SimpleARIMA(1,1,1); falls back to SES on failure
  sarima  SeasonalARIMA(1,1,1)(1,0,1)_7; falls back to ARIMA on failure

Automatic selection is driven purely by history length:
  <10 → ma7, <14 → ses, <21 → arima, otherwise sarima.

Intervals use the population standard deviation of the raw series and grow
with the square root of the horizon: forecast ± z·σ·√(h), lower bound ≥ 0.
"""

from __future__ import annotations
import logging
import math
from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Sequence

import pandas as pd

from stockcast.models.arima_model import SimpleARIMA
from stockcast.models.baselines import moving_average, simple_exponential_smoothing
from stockcast.models.sarima_model import SeasonalARIMA
from stockcast.models.series_transform import std_dev

logger = logging.getLogger(__name__)

AUTO = "auto"
MODEL_NAMES = ("ma7", "ses", "arima", "sarima")


@dataclass(frozen=True)
class ConfidenceInterval:
    forecast: float
    lower: float
    upper: float


@dataclass
class ForecastResult:
    """Point forecasts plus a parallel list of confidence intervals."""
    model: str
    predictions: list[float] = field(default_factory=list)
    confidence_intervals: list[ConfidenceInterval] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "model": self.model,
            "predictions": list(self.predictions),
            "confidence_intervals": [asdict(ci) for ci in self.confidence_intervals],
        }

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame([asdict(ci) for ci in self.confidence_intervals],
                          columns=["forecast", "lower", "upper"])
        df.insert(0, "step", range(1, len(df) + 1))
        df["model"] = self.model
        return df


class ForecastingEngine:
    def __init__(
        self,
        ma_window: int = 7,
        ses_alpha: float = 0.3,
        z_score: float = 1.96,
        arima_order: tuple[int, int, int] = (1, 1, 1),
        seasonal_order: tuple[int, int, int] = (1, 0, 1),
        seasonal_period: int = 7,
        selection_thresholds: tuple[int, int, int] = (10, 14, 21),
    ) -> None:
        self.ma_window = ma_window
        self.ses_alpha = ses_alpha
        self.z_score = z_score
        self.arima_order = tuple(arima_order)
        self.seasonal_order = tuple(seasonal_order)
        self.seasonal_period = seasonal_period
        self.selection_thresholds = tuple(selection_thresholds)
        self._models: Mapping[str, Callable[[Sequence[float], int], list[float]]] = MappingProxyType({
            "ma7": self.ma7_forecast,
            "ses": self.ses_forecast,
            "arima": self.arima_forecast,
            "sarima": self.sarima_forecast,
        })

    @classmethod
    def from_config(cls, config: dict) -> "ForecastingEngine":
        """Build from the `engine` block of configs/default.yaml."""
        cfg = config.get("engine", config)
        th = cfg.get("selection_thresholds", {})
        return cls(
            ma_window=cfg.get("ma_window", 7),
            ses_alpha=cfg.get("ses_alpha", 0.3),
            z_score=cfg.get("z_score", 1.96),
            arima_order=tuple(cfg.get("arima_order", (1, 1, 1))),
            seasonal_order=tuple(cfg.get("seasonal_order", (1, 0, 1))),
            seasonal_period=cfg.get("seasonal_period", 7),
            selection_thresholds=(
                th.get("ses", 10), th.get("arima", 14), th.get("sarima", 21)
            ),
        )

    @property
    def models(self) -> Mapping[str, Callable[[Sequence[float], int], list[float]]]:
        return self._models

    # ── Strategies ────────────────────────────────────────────────────────────

    def moving_average(self, series: Sequence[float]) -> float:
        return moving_average(series, self.ma_window)

    def simple_exponential_smoothing(self, series: Sequence[float]) -> float:
        return simple_exponential_smoothing(series, self.ses_alpha)

    def ma7_forecast(self, series: Sequence[float], steps: int = 7) -> list[float]:
        return [self.moving_average(series)] * steps

    def ses_forecast(self, series: Sequence[float], steps: int = 7) -> list[float]:
        return [self.simple_exponential_smoothing(series)] * steps

    def arima_forecast(self, series: Sequence[float], steps: int = 7) -> list[float]:
        try:
            model = SimpleARIMA(*self.arima_order)
            model.train(series)
            return model.predict(steps)
        except Exception as e:
            logger.warning(f"ARIMA failed, falling back to SES: {e}")
            return self.ses_forecast(series, steps)

    def sarima_forecast(
        self,
        series: Sequence[float],
        steps: int = 7,
        seasonal_period: Optional[int] = None,
    ) -> list[float]:
        period = self.seasonal_period if seasonal_period is None else seasonal_period
        try:
            model = SeasonalARIMA(*self.arima_order, *self.seasonal_order, s=period)
            model.train(series)
            return model.predict(steps)
        except Exception as e:
            logger.warning(f"SARIMA failed, falling back to ARIMA: {e}")
            return self.arima_forecast(series, steps)

    # ── Selection & intervals ─────────────────────────────────────────────────

    def select_best_model(self, series: Sequence[float]) -> str:
        n = len(series)
        ses_min, arima_min, sarima_min = self.selection_thresholds
        if n < ses_min:
            return "ma7"
        if n < arima_min:
            return "ses"
        if n < sarima_min:
            return "arima"
        return "sarima"

    @staticmethod
    def calculate_std_dev(series: Sequence[float]) -> float:
        return std_dev(series)

    def forecast_with_confidence(
        self,
        series: Sequence[float],
        steps: int = 7,
        model: str = AUTO,
    ) -> ForecastResult:
        """
        Forecast `steps` days ahead with the named strategy ("auto" selects by
        history length). Model failures never escape: they degrade to a
        simpler strategy. Unknown names use the moving average.
        """
        if steps < 1:
            raise ValueError(f"steps must be >= 1, got {steps}")
        series = [] if series is None else list(series)

        name = (model or AUTO).lower()
        if name == AUTO:
            name = self.select_best_model(series)
        elif name not in self._models:
            logger.warning(f"Unknown model '{model}', using ma7")
            name = "ma7"

        predictions = self._models[name](series, steps)

        sigma = self.calculate_std_dev(series)
        intervals = []
        for i, pred in enumerate(predictions):
            half_width = self.z_score * sigma * math.sqrt(i + 1)
            intervals.append(ConfidenceInterval(
                forecast=pred,
                lower=max(0.0, pred - half_width),
                upper=pred + half_width,
            ))

        logger.debug(f"{name.upper()} forecast over {len(series)} points: {predictions}")
        return ForecastResult(
            model=name.upper(),
            predictions=predictions,
            confidence_intervals=intervals,
        )
