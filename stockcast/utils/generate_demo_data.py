"""
generate_demo_data.py — Generates synthetic daily product sales for a small shop.
Usage: python -m stockcast.utils.generate_demo_data
"""
import numpy as np
import pandas as pd
from pathlib import Path
import logging

from stockcast.utils.data_loader import load_config

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
logger = logging.getLogger(__name__)

CATEGORIES = ["SNACKS", "DRINKS", "HOUSEHOLD", "PERSONAL_CARE"]

def generate_demo_sales(n_items=20, n_days=90, seed=42):
    """Return (sales_df, products_df): long-format daily sales and the product table."""
    rng = np.random.default_rng(seed)
    dates = pd.date_range(pd.Timestamp("2024-01-01"), periods=n_days, freq="D")

    sales_rows, products = [], []
    for i in range(n_items):
        cat = rng.choice(CATEGORIES)
        pid = f"{cat}_{i+1:03d}"
        # Some products are new and only have a few days of history
        days = n_days if rng.random() > 0.2 else int(rng.integers(3, 21))
        t = np.arange(days)
        sales = np.maximum(0,
            rng.uniform(3.0, 12.0) + rng.uniform(-0.02, 0.05)*t
            + rng.uniform(0.5, 3.0)*np.sin(2*np.pi*t/7 + rng.uniform(0, 2*np.pi))
            + rng.normal(0, 1.0, days)
        ).round()
        sales[rng.random(days) < 0.03] = 0
        for d, s in zip(dates[-days:], sales):
            sales_rows.append({"id": pid, "date": d, "sales": float(s)})

        min_stock = int(rng.integers(5, 20))
        stock = int(rng.choice([0, rng.integers(1, min_stock + 1), rng.integers(min_stock, 120)],
                               p=[0.1, 0.2, 0.7]))
        products.append({"id": pid, "name": f"{cat.title().replace('_', ' ')} #{i+1}",
                         "stock": stock, "min_stock": min_stock})

    return pd.DataFrame(sales_rows), pd.DataFrame(products)

def main():
    cfg = load_config()
    root = Path(__file__).resolve().parent.parent.parent
    out_dir = root / cfg["data"]["demo_dir"]
    out_dir.mkdir(parents=True, exist_ok=True)
    sales, products = generate_demo_sales(
        n_items=cfg["data"]["n_demo_items"], n_days=cfg["data"]["n_demo_days"],
        seed=cfg["data"]["seed"])
    sales.to_parquet(out_dir / "sales.parquet", index=False)
    products.to_parquet(out_dir / "products.parquet", index=False)
    logger.info(f"Demo data saved to {out_dir}")
    logger.info(f"   sales: {sales.shape} | products: {products.shape}")

if __name__ == "__main__":
    main()
