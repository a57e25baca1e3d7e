"""alerts.py — Stock-level priority alerts, critical first."""
from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Iterable

from stockcast.inventory.demand import Product

PRIORITY_ORDER = {"critical": 0, "warning": 1}


@dataclass(frozen=True)
class Alert:
    priority: str
    title: str
    message: str
    action: str
    product_id: str


@dataclass
class AlertReport:
    alerts: list[Alert] = field(default_factory=list)
    critical_count: int = 0
    warning_count: int = 0
    optimal_count: int = 0
    total: int = 0


def classify_product(product: Product, restock_window_days: float = 3) -> Alert | str | None:
    """
    Return an Alert for products that need attention, "optimal" for products
    stocked above twice their minimum, or None otherwise.
    """
    days_left = product.stock / (product.daily_sales or 1)

    if product.stock == 0:
        return Alert("critical", "OUT OF STOCK",
                     f"{product.name} - Restock immediately!", "Restock Now", product.id)
    if product.stock <= product.min_stock:
        return Alert("critical", "LOW STOCK ALERT",
                     f"{product.name} - Only {product.stock:g} left (min: {product.min_stock:g})",
                     "Add Stock", product.id)
    if days_left <= restock_window_days and product.daily_sales > 0:
        return Alert("warning", "RESTOCK SOON",
                     f"{product.name} - Estimated {math.ceil(days_left)} days remaining",
                     "Plan Restock", product.id)
    if product.stock > product.min_stock * 2:
        return "optimal"
    return None


def priority_alerts(
    products: Iterable[Product],
    limit: int = 5,
    restock_window_days: float = 3,
) -> AlertReport:
    report = AlertReport()
    alerts = []
    for product in products:
        report.total += 1
        outcome = classify_product(product, restock_window_days)
        if outcome == "optimal":
            report.optimal_count += 1
        elif isinstance(outcome, Alert):
            alerts.append(outcome)
            if outcome.priority == "critical":
                report.critical_count += 1
            else:
                report.warning_count += 1

    alerts.sort(key=lambda a: PRIORITY_ORDER[a.priority])
    report.alerts = alerts[:limit]
    return report
