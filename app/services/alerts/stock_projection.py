# app/services/alerts/stock_projection.py
"""
Pure arithmetic behind low-stock alerts.

Nothing here touches the database; the alert service feeds it rows it has
already fetched.
"""

from datetime import date, timedelta
from fractions import Fraction
from typing import Optional

from app.core.config import (
    LOW_STOCK_DEFAULT_THRESHOLD,
    RECENT_SALES_WINDOW_DAYS,
    STOCKOUT_FALLBACK_DAYS,
)

CRITICAL_STOCK_LEVEL = 5


def resolve_threshold(
    product_threshold: Optional[int],
    category_threshold: Optional[int],
    default: int = LOW_STOCK_DEFAULT_THRESHOLD,
) -> int:
    """Product override, then category default, then the global fallback."""
    if product_threshold is not None:
        return product_threshold
    if category_threshold is not None:
        return category_threshold
    return default


def sales_window_start(
    as_of: date,
    window_days: int = RECENT_SALES_WINDOW_DAYS,
) -> date:
    """Inclusive lower bound of the trailing sales window."""
    return as_of - timedelta(days=window_days)


def average_daily_sales(units_sold: Optional[int], active_days: Optional[int]) -> Fraction:
    """
    Units per day that had at least one sales row.

    Days with no sales rows at all do not dilute the average.
    """
    if not active_days or not units_sold:
        return Fraction(0)
    return Fraction(units_sold, active_days)


def days_until_stockout(
    current_stock: int,
    avg_daily_sales: Fraction,
    fallback_days: int = STOCKOUT_FALLBACK_DAYS,
) -> int:
    if avg_daily_sales > 0:
        days = int(Fraction(current_stock) // avg_daily_sales)
    elif current_stock > 0:
        # No measurable velocity
        days = fallback_days
    else:
        days = 0
    return max(0, days)
