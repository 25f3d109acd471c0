# services/valuation_service.py

from decimal import Decimal
from typing import Iterable, List

from schemas import DerivedMetrics, InventoryItem, ItemView, StockStatus

LOW_STOCK_THRESHOLD = 5


def line_total(item: InventoryItem) -> Decimal:
    return item.price * item.qty


def compute_total_value(items: Iterable[InventoryItem]) -> Decimal:
    """
    Sum of price * qty over all items. Zero price or quantity simply
    contributes nothing; an empty inventory is worth 0.
    """
    return sum((line_total(item) for item in items), Decimal("0"))


def classify_stock(item: InventoryItem) -> StockStatus:
    if item.qty < LOW_STOCK_THRESHOLD:
        return StockStatus.LOW_STOCK
    return StockStatus.ADEQUATE


def compute_metrics(items: List[InventoryItem]) -> DerivedMetrics:
    """
    Derives every computed value the list view shows from the current items.
    Nothing here is persisted.
    """
    rows = [ItemView(item=item, line_total=line_total(item), stock_status=classify_stock(item))
            for item in items]
    return DerivedMetrics(
        total_value=compute_total_value(items),
        item_count=len(items),
        low_stock_count=sum(1 for row in rows if row.is_low_stock),
        rows=rows,
    )
