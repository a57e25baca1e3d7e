"""
data_loader.py — Loads the YAML config and reshapes long-format sales into
per-product series.
"""
from __future__ import annotations
import logging
from pathlib import Path

import pandas as pd
import yaml

from stockcast.inventory.demand import Product

logger = logging.getLogger(__name__)

def load_config(path: str = "configs/default.yaml") -> dict:
    p = Path(path)
    if not p.is_absolute():
        p = Path(__file__).resolve().parent.parent.parent / path
    with open(p) as f:
        return yaml.safe_load(f)

def series_by_product(df: pd.DataFrame, id_col: str = "id", date_col: str = "date",
                      target_col: str = "sales") -> dict[str, list[float]]:
    """Chronological sales list per product id."""
    df = df.sort_values([id_col, date_col])
    return {str(k): g[target_col].astype(float).tolist() for k, g in df.groupby(id_col, sort=False)}

def build_products(products_df: pd.DataFrame, sales_df: pd.DataFrame,
                   daily_window: int = 7) -> list[Product]:
    """Join the product table with each product's sales history."""
    histories = series_by_product(sales_df)
    products = []
    for row in products_df.to_dict("records"):
        history = histories.get(str(row["id"]), [])
        recent = history[-daily_window:]
        row["sales_history"] = history
        row["daily_sales"] = sum(recent) / len(recent) if recent else 0.0
        products.append(Product.from_dict(row))
    logger.info(f"Built {len(products)} products ({sum(1 for p in products if p.sales_history)} with history)")
    return products
