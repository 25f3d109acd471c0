# services/sync_controller.py

from typing import List, Optional

from fastapi.concurrency import run_in_threadpool

from exceptions import FetchError, StoreError, ValidationError
from schemas import InventoryItem, InventoryState, ItemDraft, ItemId, ItemPayload, MutationOutcome
from services.edit_session import EditSessionController
from services.notifications import NotificationKind, Notifier
from services.valuation_service import compute_metrics
from store_service import RecordStoreClient
from utils import get_logger

logger = get_logger("sync")


class SyncController:
    """
    Owns the authoritative item list and keeps it in line with the record store.

    The list is only ever replaced as a whole by refresh(); mutations never
    patch it locally. Overlapping calls are not sequenced: whichever refresh
    response arrives last is what the page shows.
    """

    def __init__(self, store: RecordStoreClient, clear_session_on_store_error: bool = True,
                 reject_negative_values: bool = False):
        self.store = store
        self.clear_session_on_store_error = clear_session_on_store_error
        self.editor = EditSessionController(reject_negative_values=reject_negative_values)
        self.state = InventoryState(session=self.editor.session)

    def _sync_session(self) -> None:
        self.state.session = self.editor.session

    def find_item(self, item_id: ItemId) -> Optional[InventoryItem]:
        # Ids arrive as path strings from the web layer, rows may hold ints.
        return next((i for i in self.state.items if str(i.id) == str(item_id)), None)

    # ---------- loading ----------

    async def refresh(self) -> List[InventoryItem]:
        self.state.loading = True
        try:
            try:
                items = await run_in_threadpool(self.store.fetch_all)
                self.state.fetch_error = None
            except FetchError as e:
                logger.warning("Refresh failed, showing an empty inventory: %s", e)
                items = []
                self.state.fetch_error = e.message
            self.state.items = items
            self.state.metrics = compute_metrics(items)
            logger.debug("Refreshed %d items, total value %s", len(items), self.state.metrics.total_value)
        finally:
            self.state.loading = False
        return self.state.items

    # ---------- form ----------

    def begin_edit(self, item_id: ItemId) -> None:
        item = self.find_item(item_id)
        if item is None:
            raise KeyError(item_id)
        self.editor.begin_edit(item)
        self._sync_session()

    def cancel_edit(self) -> None:
        self.editor.cancel_edit()
        self._sync_session()

    async def submit(self, notifier: Notifier, draft: Optional[ItemDraft] = None) -> MutationOutcome:
        """
        Creates or updates a row from the form draft, then reloads the list.

        Invalid input never reaches the store and leaves the draft in place
        for correction.
        """
        if draft is not None:
            self.editor.update_draft(draft)
            self._sync_session()
        target_id = self.editor.target_id

        try:
            payload = self.editor.to_payload()
        except ValidationError as e:
            logger.info("Rejected draft: %s", e.message)
            notifier.notify(NotificationKind.ERROR, "Invalid input", e.message)
            return MutationOutcome.INVALID

        ok = await self._write(notifier, target_id, payload)

        if not ok and not self.clear_session_on_store_error:
            return MutationOutcome.STORE_ERROR

        self.editor.reset()
        self._sync_session()
        await self.refresh()
        return MutationOutcome.SAVED if ok else MutationOutcome.STORE_ERROR

    async def update_item(self, item_id: ItemId, notifier: Notifier, draft: ItemDraft) -> MutationOutcome:
        """
        Updates one row directly from a draft, for API callers. The form's
        edit session is neither read nor changed.
        """
        item = self.find_item(item_id)
        if item is None:
            raise KeyError(item_id)

        try:
            payload = self.editor.to_payload(draft)
        except ValidationError as e:
            logger.info("Rejected draft for %s: %s", item.id, e.message)
            notifier.notify(NotificationKind.ERROR, "Invalid input", e.message)
            return MutationOutcome.INVALID

        ok = await self._write(notifier, item.id, payload)
        await self.refresh()
        return MutationOutcome.SAVED if ok else MutationOutcome.STORE_ERROR

    async def _write(self, notifier: Notifier, target_id: Optional[ItemId], payload: ItemPayload) -> bool:
        try:
            if target_id is not None:
                await run_in_threadpool(self.store.update, target_id, payload)
                notifier.notify(NotificationKind.SUCCESS, "Updated", toast=True)
            else:
                await run_in_threadpool(self.store.create, payload)
                notifier.notify(NotificationKind.SUCCESS, "Saved!", "Added to stock.")
        except StoreError as e:
            action = "Update" if target_id is not None else "Save"
            logger.warning("%s of %s failed: %s", action, payload.name, e.message)
            notifier.notify(NotificationKind.ERROR, f"{action} failed", e.message)
            return False
        return True

    # ---------- delete ----------

    async def remove(self, item_id: ItemId, notifier: Notifier) -> MutationOutcome:
        """Deletes a row after the user confirms; anything but a yes leaves everything as it was."""
        item = self.find_item(item_id)
        label = item.name if item else str(item_id)
        target_id = item.id if item else item_id

        if not await notifier.confirm("Delete?", f"Remove {label}?", NotificationKind.WARNING):
            logger.debug("Delete of %s not confirmed", label)
            return MutationOutcome.CANCELLED

        ok = True
        try:
            await run_in_threadpool(self.store.delete, target_id)
        except StoreError as e:
            ok = False
            logger.warning("Delete of %s failed: %s", label, e.message)
            notifier.notify(NotificationKind.ERROR, "Delete failed", e.message)
        await self.refresh()
        return MutationOutcome.DELETED if ok else MutationOutcome.STORE_ERROR
