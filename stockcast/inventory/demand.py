"""
demand.py — Next-week demand board for a product catalogue.

Each product's sales history is forecast with the engine and summarised as
total demand over the horizon, average daily demand and a restock flag
(current stock below the forecast demand).
"""
from __future__ import annotations
import logging
from dataclasses import asdict, dataclass, field
from typing import Iterable

import pandas as pd

from stockcast.models.engine import ConfidenceInterval, ForecastingEngine

logger = logging.getLogger(__name__)


@dataclass
class Product:
    id: str
    name: str
    stock: float = 0.0
    min_stock: float = 0.0
    daily_sales: float = 0.0
    sales_history: list[float] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict) -> "Product":
        return cls(
            id=str(d["id"]),
            name=d.get("name", str(d["id"])),
            stock=float(d.get("stock", 0) or 0),
            min_stock=float(d.get("min_stock", 0) or 0),
            daily_sales=float(d.get("daily_sales", 0) or 0),
            sales_history=[float(v) for v in d.get("sales_history", []) or []],
        )


@dataclass
class DemandSummary:
    product_id: str
    product_name: str
    model: str
    next_week_demand: float
    avg_daily: float
    current_stock: float
    confidence: list[ConfidenceInterval] = field(default_factory=list)

    @property
    def needs_restock(self) -> bool:
        return self.current_stock < self.next_week_demand


def summarize_demand(
    products: Iterable[Product],
    engine: ForecastingEngine,
    model: str = "auto",
    horizon: int = 7,
    min_history: int = 3,
) -> list[DemandSummary]:
    """Forecast every product with enough history; highest demand first."""
    summaries = []
    for product in products:
        if len(product.sales_history) < min_history:
            logger.debug(
                f"Skipping {product.id}: {len(product.sales_history)} sales points "
                f"(< {min_history})"
            )
            continue
        result = engine.forecast_with_confidence(product.sales_history, horizon, model)
        total = float(sum(result.predictions))
        summaries.append(DemandSummary(
            product_id=product.id,
            product_name=product.name,
            model=result.model,
            next_week_demand=total,
            avg_daily=total / horizon,
            current_stock=product.stock,
            confidence=result.confidence_intervals,
        ))
    summaries.sort(key=lambda s: s.next_week_demand, reverse=True)
    return summaries


def demand_dataframe(summaries: list[DemandSummary]) -> pd.DataFrame:
    cols = ["product_id", "product_name", "model", "next_week_demand",
            "avg_daily", "current_stock", "needs_restock"]
    rows = []
    for s in summaries:
        row = {k: v for k, v in asdict(s).items() if k != "confidence"}
        row["needs_restock"] = s.needs_restock
        rows.append(row)
    return pd.DataFrame(rows, columns=cols)
