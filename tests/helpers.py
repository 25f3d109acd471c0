"""Shared builders for the test suite: stored rows and an in-memory record store."""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from exceptions import FetchError, StoreError
from schemas import InventoryItem

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def make_item(item_id, name, price, qty, minutes=0):
    """Helper to build a stored row created `minutes` after T0"""
    return InventoryItem(id=item_id, name=name, price=Decimal(str(price)), qty=qty,
                         created_at=T0 + timedelta(minutes=minutes))


class FakeStore:
    """In-memory stand-in for RecordStoreClient that records every call."""

    def __init__(self, rows=None):
        self.rows = list(rows or [])
        self.calls = []
        self.fail_on = set()
        self._next_id = max([r.id for r in self.rows], default=0) + 1
        self._clock = max([r.created_at for r in self.rows], default=T0)

    def _check(self, op):
        if op in self.fail_on:
            if op == "fetch_all":
                raise FetchError("backend unreachable")
            raise StoreError(f"{op} rejected", status_code=500)

    def fetch_all(self):
        self.calls.append(("fetch_all",))
        self._check("fetch_all")
        return sorted(self.rows, key=lambda r: r.created_at, reverse=True)

    def list_all(self):
        try:
            return self.fetch_all()
        except FetchError:
            return []

    def create(self, payload):
        self.calls.append(("create", payload))
        self._check("create")
        self._clock += timedelta(minutes=1)
        self.rows.append(InventoryItem(id=self._next_id, name=payload.name, price=payload.price,
                                       qty=payload.qty, created_at=self._clock))
        self._next_id += 1

    def update(self, item_id, payload):
        self.calls.append(("update", item_id, payload))
        self._check("update")
        self.rows = [r.model_copy(update={"name": payload.name, "price": payload.price, "qty": payload.qty})
                     if r.id == item_id else r for r in self.rows]

    def delete(self, item_id):
        self.calls.append(("delete", item_id))
        self._check("delete")
        self.rows = [r for r in self.rows if r.id != item_id]

    def mutations(self):
        return [c for c in self.calls if c[0] != "fetch_all"]
