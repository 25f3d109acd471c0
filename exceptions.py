# exceptions.py
from typing import Optional


class InventoryError(Exception):
    """Base class for every recoverable error raised by the inventory core."""


class ValidationError(InventoryError):
    """Raw form input could not be turned into a valid payload."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class StoreError(InventoryError):
    """A create/update/delete call against the record store failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class FetchError(StoreError):
    """Listing the collection failed."""
