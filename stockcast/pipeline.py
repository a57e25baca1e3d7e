"""
pipeline.py
-----------
End-to-end run on demo data: backtest leaderboard → demand board → alerts.

Usage:
    python -m stockcast.pipeline
    python -m stockcast.pipeline --models arima sarima --horizon 14
"""

from __future__ import annotations
import argparse
import logging

from stockcast.evaluation.backtest import compare_models, walk_forward_backtest
from stockcast.inventory.alerts import priority_alerts
from stockcast.inventory.demand import demand_dataframe, summarize_demand
from stockcast.models.engine import ForecastingEngine
from stockcast.utils.data_loader import build_products, load_config
from stockcast.utils.generate_demo_data import generate_demo_sales

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def run_pipeline(config: dict, models: list[str] | None = None,
                 model: str | None = None, horizon: int | None = None) -> None:
    engine = ForecastingEngine.from_config(config)
    fc_cfg = config["forecast"]
    eval_cfg = config["evaluation"]
    inv_cfg = config["inventory"]
    model = model or fc_cfg["model"]
    horizon = horizon or fc_cfg["horizon"]

    # ── 1. Data ───────────────────────────────────────────────────────────────
    logger.info("=" * 60)
    logger.info("STEP 1/4 — Generating demo sales")
    logger.info("=" * 60)
    data_cfg = config["data"]
    sales_df, products_df = generate_demo_sales(
        n_items=data_cfg["n_demo_items"], n_days=data_cfg["n_demo_days"], seed=data_cfg["seed"])
    products = build_products(products_df, sales_df)

    # ── 2. Backtest ───────────────────────────────────────────────────────────
    logger.info("=" * 60)
    logger.info("STEP 2/4 — Walk-forward backtesting")
    logger.info("=" * 60)
    results = []
    for name in models or eval_cfg["models"]:
        logger.info(f"▶ {name.upper()}")
        try:
            results.append(walk_forward_backtest(
                sales_df, engine, model=name,
                horizon=eval_cfg["horizon"],
                n_splits=eval_cfg["n_splits"],
                min_train_days=eval_cfg["min_train_days"],
            ))
        except ValueError as e:
            logger.error(f"{name} backtest skipped: {e}")
    leaderboard = compare_models(results)

    # ── 3. Demand board ───────────────────────────────────────────────────────
    logger.info("=" * 60)
    logger.info(f"STEP 3/4 — {horizon}-day demand forecast ({model})")
    logger.info("=" * 60)
    summaries = summarize_demand(products, engine, model=model, horizon=horizon,
                                 min_history=fc_cfg["min_history"])
    board = demand_dataframe(summaries)

    # ── 4. Alerts ─────────────────────────────────────────────────────────────
    logger.info("=" * 60)
    logger.info("STEP 4/4 — Priority alerts")
    logger.info("=" * 60)
    report = priority_alerts(products, limit=inv_cfg["max_alerts"],
                             restock_window_days=inv_cfg["restock_window_days"])

    print("\n" + "=" * 60)
    print("MODEL LEADERBOARD")
    print("=" * 60)
    print(leaderboard.to_string())

    print("\n" + "=" * 60)
    print(f"TOP PRODUCTS BY DEMAND (next {horizon} days)")
    print("=" * 60)
    if board.empty:
        print("No forecast data available yet.")
    else:
        print(board.head(inv_cfg["top_products"]).to_string(index=False))
        if len(board) > inv_cfg["top_products"]:
            print(f"... and {len(board) - inv_cfg['top_products']} more products")

    print("\n" + "=" * 60)
    print(f"ALERTS  critical={report.critical_count} warning={report.warning_count} "
          f"optimal={report.optimal_count} total={report.total}")
    print("=" * 60)
    for alert in report.alerts:
        print(f"[{alert.priority.upper():8}] {alert.title}: {alert.message} → {alert.action}")


def main():
    parser = argparse.ArgumentParser(description="Retail demand forecasting")
    parser.add_argument("--config", default="configs/default.yaml")
    parser.add_argument("--model", choices=["auto", "ma7", "ses", "arima", "sarima"],
                        help="Strategy for the demand board (default from config)")
    parser.add_argument("--horizon", type=int, help="Days to forecast")
    parser.add_argument("--models", nargs="+",
                        help="Subset of strategies to backtest: ma7 ses arima sarima")
    args = parser.parse_args()
    run_pipeline(load_config(args.config), models=args.models,
                 model=args.model, horizon=args.horizon)


if __name__ == "__main__":
    main()
