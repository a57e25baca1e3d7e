"""exceptions.py — Errors raised by the forecasting models."""
from __future__ import annotations


class ForecastError(Exception):
    """Base class for model-level forecasting failures."""


class InsufficientDataError(ForecastError, ValueError):
    def __init__(self, required: int, received: int, model: str = "ARIMA"):
        self.required = required
        self.received = received
        super().__init__(
            f"Need at least {required} data points for {model}, got {received}"
        )


class NotTrainedError(ForecastError, RuntimeError):
    def __init__(self, model: str = "model"):
        super().__init__(f"{model} must be trained before calling predict()")
