# store_service.py
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError as SchemaError

from exceptions import FetchError, StoreError
from schemas import InventoryItem, ItemId, ItemPayload
from utils import get_logger

logger = get_logger("store")

ORDER_COLUMN = "created_at"
# Error bodies end up in notifications and the flash cookie.
MAX_ERROR_TEXT = 300


def _clip(text: str) -> str:
    return text if len(text) <= MAX_ERROR_TEXT else text[:MAX_ERROR_TEXT] + "..."


class RecordStoreClient:
    """
    CRUD over a single table of a managed Postgres backend through its
    PostgREST endpoint. Calls are blocking and never retried.
    """

    def __init__(self, store_url: str, api_key: str, table: str, timeout: float = 30.0,
                 session: Optional[requests.Session] = None):
        if not all([store_url, table]):
            raise ValueError("Store URL and table name are required.")
        self.endpoint = f"{store_url.rstrip('/')}/rest/v1/{table}"
        self.table = table
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json", "apikey": api_key}
        if api_key:
            self.headers["Authorization"] = f"Bearer {api_key}"
        self.http = session or requests.Session()

    def _request(self, method: str, params: Optional[Dict[str, str]] = None,
                 json: Any = None, prefer: Optional[str] = None) -> requests.Response:
        headers = dict(self.headers)
        if prefer:
            headers["Prefer"] = prefer
        logger.debug("%s %s params=%s body=%s", method, self.endpoint, params, json)
        try:
            response = self.http.request(method, self.endpoint, headers=headers, params=params,
                                         json=json, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise StoreError(_clip(f"{method} {self.table} failed: {e}")) from e
        if not response.ok:
            raise StoreError(_clip(f"{method} {self.table} returned {response.status_code}: {response.text}"),
                             status_code=response.status_code)
        return response

    @staticmethod
    def _match_id(item_id: ItemId) -> Dict[str, str]:
        return {"id": f"eq.{item_id}"}

    def fetch_all(self) -> List[InventoryItem]:
        """All rows, newest first. Raises FetchError when the listing fails."""
        try:
            response = self._request("GET", params={"select": "*", "order": f"{ORDER_COLUMN}.desc"})
            rows = response.json()
        except StoreError as e:
            raise FetchError(e.message, status_code=e.status_code) from e
        except ValueError as e:
            raise FetchError(f"GET {self.table} returned invalid JSON: {e}") from e
        if not isinstance(rows, list):
            raise FetchError(f"GET {self.table} returned {type(rows).__name__}, expected a list")

        items: List[InventoryItem] = []
        for row in rows:
            try:
                items.append(InventoryItem.model_validate(row))
            except SchemaError as e:
                logger.warning("Skipping malformed row %s: %s", row, e)
        return items

    def list_all(self) -> List[InventoryItem]:
        """
        All rows, newest first. A failed listing is reported as an empty
        table; use fetch_all() to tell the two apart.
        """
        try:
            return self.fetch_all()
        except FetchError as e:
            logger.warning("Listing %s failed, treating as empty: %s", self.table, e)
            return []

    def create(self, payload: ItemPayload) -> None:
        self._request("POST", json=[payload.to_row()], prefer="return=minimal")

    def update(self, item_id: ItemId, payload: ItemPayload) -> None:
        self._request("PATCH", params=self._match_id(item_id), json=payload.to_row(),
                      prefer="return=minimal")

    def delete(self, item_id: ItemId) -> None:
        self._request("DELETE", params=self._match_id(item_id))
