"""Stock status classification.

``classify`` is the only place the thresholds live. The SQL helpers below
express the same rule over column expressions so list filters and summary
counts agree with what ``classify`` reports for a loaded item.
"""

from enum import Enum as PyEnum

from sqlalchemy import ColumnElement, and_, true


class StockStatus(str, PyEnum):
    OUT_OF_STOCK = "out_of_stock"
    LOW_STOCK = "low_stock"
    IN_STOCK = "in_stock"


def classify(quantity: int, min_quantity: int) -> StockStatus:
    if quantity == 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= min_quantity:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def parse_status(value: str | None) -> StockStatus | None:
    """Map a filter value to a status; ``None`` means no status filter ("all" or unknown)."""
    if not value:
        return None
    try:
        return StockStatus(value.lower())
    except ValueError:
        return None


def status_clause(status: StockStatus, quantity, min_quantity) -> ColumnElement[bool]:
    if status == StockStatus.OUT_OF_STOCK:
        return quantity == 0
    if status == StockStatus.LOW_STOCK:
        return and_(quantity > 0, quantity <= min_quantity)
    if status == StockStatus.IN_STOCK:
        # zero stays out_of_stock whatever the threshold
        return and_(quantity > 0, quantity > min_quantity)
    return true()

