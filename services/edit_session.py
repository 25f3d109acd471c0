# services/edit_session.py

import math
from typing import Any, Optional

from exceptions import ValidationError
from schemas import EditSession, InventoryItem, ItemDraft, ItemPayload
from utils import to_decimal, to_int


def _shorten(value: Any, limit: int = 40) -> str:
    text = str(value)
    return text if len(text) <= limit else text[:limit] + "..."


class EditSessionController:
    """
    Keeps the single create-vs-edit session of the form and turns raw form
    input into a payload the record store accepts.
    """

    def __init__(self, reject_negative_values: bool = False):
        self.reject_negative_values = reject_negative_values
        self.session = EditSession()

    @property
    def target_id(self):
        return self.session.target_id

    def begin_edit(self, item: InventoryItem) -> EditSession:
        self.session = EditSession(
            target_id=item.id,
            draft=ItemDraft(name=item.name, price=item.price, qty=item.qty),
        )
        return self.session

    def cancel_edit(self) -> EditSession:
        self.session = EditSession()
        return self.session

    # Submitting resets exactly like cancelling does.
    reset = cancel_edit

    def update_draft(self, draft: ItemDraft) -> None:
        self.session = EditSession(target_id=self.session.target_id, draft=draft)

    def to_payload(self, draft: Optional[ItemDraft] = None) -> ItemPayload:
        draft = draft if draft is not None else self.session.draft

        name = (draft.name or "").strip()
        if not name:
            raise ValidationError("Name is required.", field="name")

        price = to_decimal(draft.price)
        if price is None:
            raise ValidationError(f"Price '{_shorten(draft.price)}' is not a number.", field="price")
        # The store receives a JSON number, so the price must fit in a float.
        if not math.isfinite(float(price)):
            raise ValidationError(f"Price '{_shorten(draft.price)}' is too large.", field="price")

        qty = to_int(draft.qty)
        if qty is None:
            raise ValidationError(f"Quantity '{_shorten(draft.qty)}' is not a whole number.", field="qty")

        if self.reject_negative_values:
            if price < 0:
                raise ValidationError("Price cannot be negative.", field="price")
            if qty < 0:
                raise ValidationError("Quantity cannot be negative.", field="qty")

        return ItemPayload(name=name, price=price, qty=qty)
