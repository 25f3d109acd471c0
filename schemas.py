# schemas.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

ItemId = Union[int, str]

# =========================
# Base model configurations
# =========================

class APIBase(BaseModel):
    """Base for models mapped to record store rows."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

# =========================
# Record store rows
# =========================

class MutationOutcome(str, Enum):
    SAVED = "saved"
    DELETED = "deleted"
    CANCELLED = "cancelled"
    INVALID = "invalid"
    STORE_ERROR = "store_error"

class StockStatus(str, Enum):
    LOW_STOCK = "low_stock"
    ADEQUATE = "adequate"

class InventoryItem(APIBase):
    id: ItemId
    name: str
    price: Decimal = Decimal("0")
    qty: int = 0
    created_at: Optional[datetime] = None

class ItemPayload(BaseModel):
    """A validated row ready to be written to the store."""
    name: str
    price: Decimal
    qty: int

    def to_row(self) -> Dict[str, Any]:
        return {"name": self.name, "price": float(self.price), "qty": self.qty}

# =========================
# Local, ephemeral UI state
# =========================

class ItemDraft(BaseModel):
    """Raw form input. Values stay as typed until to_payload parses them."""
    name: str = ""
    price: Union[str, int, float, Decimal] = ""
    qty: Union[str, int, float, Decimal] = ""

class EditSession(BaseModel):
    target_id: Optional[ItemId] = None
    draft: ItemDraft = Field(default_factory=ItemDraft)

    @property
    def is_editing(self) -> bool:
        return self.target_id is not None

# =========================
# Derived values
# =========================

class ItemView(BaseModel):
    """A row as the list view shows it: stored fields plus computed ones."""
    item: InventoryItem
    line_total: Decimal
    stock_status: StockStatus

    @property
    def is_low_stock(self) -> bool:
        return self.stock_status == StockStatus.LOW_STOCK

class DerivedMetrics(BaseModel):
    total_value: Decimal = Decimal("0")
    item_count: int = 0
    low_stock_count: int = 0
    rows: List[ItemView] = Field(default_factory=list)

class InventoryState(BaseModel):
    """Everything the presentation layer needs, owned by the sync controller."""
    items: List[InventoryItem] = Field(default_factory=list)
    session: EditSession = Field(default_factory=EditSession)
    loading: bool = False
    fetch_error: Optional[str] = None
    metrics: DerivedMetrics = Field(default_factory=DerivedMetrics)

# =========================
# API responses
# =========================

class NotificationOut(BaseModel):
    kind: str
    title: str
    body: Optional[str] = None
    toast: bool = False

class InventoryResponse(BaseModel):
    outcome: Optional[MutationOutcome] = None
    items: List[InventoryItem]
    metrics: DerivedMetrics
    loading: bool
    fetch_error: Optional[str] = None
    session: EditSession
    notifications: List[NotificationOut] = Field(default_factory=list)
