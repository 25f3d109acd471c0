# routes/inventory.py

import base64
import json
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

import schemas
from schemas import ItemDraft, MutationOutcome
from services.notifications import Notification, RequestNotifier
from services.sync_controller import SyncController
from utils import format_money, get_logger

logger = get_logger("routes.inventory")

ROOT_DIR = Path(__file__).resolve().parent.parent
templates = Jinja2Templates(directory=str(ROOT_DIR / "templates"))
templates.env.filters["money"] = format_money

FLASH_COOKIE = "inventory_flash"
THEME_COOKIE = "inventory_theme"

OUTCOME_STATUS = {
    MutationOutcome.INVALID: 422,
    MutationOutcome.STORE_ERROR: 502,
}

router = APIRouter(
    tags=["Inventory"],
    responses={404: {"description": "Not found"}},
)


def get_controller(request: Request) -> SyncController:
    return request.app.state.controller


# ---------- flash helpers ----------

def _encode_flash(notifications: List[Notification]) -> str:
    raw = json.dumps([n.to_dict() for n in notifications]).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def _read_flash(request: Request) -> List[Notification]:
    value = request.cookies.get(FLASH_COOKIE)
    if not value:
        return []
    try:
        raw = json.loads(base64.urlsafe_b64decode(value.encode("ascii")))
        return [Notification(**n) for n in raw]
    except (ValueError, TypeError) as e:
        logger.warning("Dropping unreadable flash cookie: %s", e)
        return []


def _redirect_with_flash(notifier: RequestNotifier) -> RedirectResponse:
    response = RedirectResponse(url="/inventory", status_code=303)
    if notifier.notifications:
        response.set_cookie(FLASH_COOKIE, _encode_flash(notifier.notifications),
                            httponly=True, samesite="lax", max_age=60)
    return response


def _is_yes(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


# ---------- HTML pages ----------

@router.get("/", response_class=RedirectResponse, include_in_schema=False)
async def read_root():
    return RedirectResponse(url="/inventory")


@router.get("/inventory", response_class=HTMLResponse, include_in_schema=False)
async def get_inventory_page(request: Request, controller: SyncController = Depends(get_controller)):
    notifications = _read_flash(request)
    state = controller.state
    response = templates.TemplateResponse(request, "inventory.html", {
        "title": request.app.title,
        "state": state,
        "session": state.session,
        "metrics": state.metrics,
        "notifications": notifications,
        "theme": request.cookies.get(THEME_COOKIE, "light"),
    })
    if notifications:
        response.delete_cookie(FLASH_COOKIE)
    return response


@router.post("/inventory/items", include_in_schema=False)
async def submit_item_form(
    name: str = Form(""),
    price: str = Form(""),
    qty: str = Form(""),
    controller: SyncController = Depends(get_controller),
):
    notifier = RequestNotifier()
    await controller.submit(notifier, ItemDraft(name=name, price=price, qty=qty))
    return _redirect_with_flash(notifier)


@router.post("/inventory/items/{item_id}/edit", include_in_schema=False)
async def begin_edit_form(item_id: str, controller: SyncController = Depends(get_controller)):
    try:
        controller.begin_edit(item_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Item not found")
    return RedirectResponse(url="/inventory", status_code=303)


@router.post("/inventory/edit/cancel", include_in_schema=False)
async def cancel_edit_form(controller: SyncController = Depends(get_controller)):
    controller.cancel_edit()
    return RedirectResponse(url="/inventory", status_code=303)


@router.post("/inventory/items/{item_id}/delete", include_in_schema=False)
async def delete_item_form(
    item_id: str,
    confirmed: str = Form(""),
    controller: SyncController = Depends(get_controller),
):
    notifier = RequestNotifier(confirmed=_is_yes(confirmed))
    await controller.remove(item_id, notifier)
    return _redirect_with_flash(notifier)


@router.post("/inventory/refresh", include_in_schema=False)
async def refresh_form(controller: SyncController = Depends(get_controller)):
    await controller.refresh()
    return RedirectResponse(url="/inventory", status_code=303)


@router.post("/inventory/theme", include_in_schema=False)
async def toggle_theme(request: Request):
    current = request.cookies.get(THEME_COOKIE, "light")
    response = RedirectResponse(url="/inventory", status_code=303)
    response.set_cookie(THEME_COOKIE, "light" if current == "dark" else "dark",
                        samesite="lax", max_age=60 * 60 * 24 * 365)
    return response


# ---------- JSON API ----------

def _state_response(controller: SyncController, notifier: Optional[RequestNotifier] = None,
                    outcome: Optional[MutationOutcome] = None) -> JSONResponse:
    state = controller.state
    body = schemas.InventoryResponse(
        outcome=outcome,
        items=state.items,
        metrics=state.metrics,
        loading=state.loading,
        fetch_error=state.fetch_error,
        session=state.session,
        notifications=notifier.as_dicts() if notifier else [],
    )
    return JSONResponse(content=body.model_dump(mode="json"), status_code=OUTCOME_STATUS.get(outcome, 200))


@router.get("/api/inventory", response_model=schemas.InventoryResponse)
async def get_inventory(controller: SyncController = Depends(get_controller)):
    """
    Current items, derived metrics and form session.
    """
    return _state_response(controller)


@router.post("/api/inventory/refresh", response_model=schemas.InventoryResponse)
async def refresh_inventory(controller: SyncController = Depends(get_controller)):
    await controller.refresh()
    return _state_response(controller)


@router.post("/api/inventory", response_model=schemas.InventoryResponse)
async def submit_item(draft: ItemDraft, controller: SyncController = Depends(get_controller)):
    """
    Submits a draft in the current session mode: creates a new item, or
    updates the item being edited.
    """
    notifier = RequestNotifier()
    outcome = await controller.submit(notifier, draft)
    return _state_response(controller, notifier, outcome)


@router.put("/api/inventory/{item_id}", response_model=schemas.InventoryResponse)
async def update_item(item_id: str, draft: ItemDraft, controller: SyncController = Depends(get_controller)):
    """
    Updates one item directly. The HTML form's edit session is left alone.
    """
    notifier = RequestNotifier()
    try:
        outcome = await controller.update_item(item_id, notifier, draft)
    except KeyError:
        raise HTTPException(status_code=404, detail="Item not found")
    return _state_response(controller, notifier, outcome)


@router.delete("/api/inventory/{item_id}", response_model=schemas.InventoryResponse)
async def delete_item(
    item_id: str,
    confirmed: bool = Query(False),
    controller: SyncController = Depends(get_controller),
):
    notifier = RequestNotifier(confirmed=confirmed)
    outcome = await controller.remove(item_id, notifier)
    return _state_response(controller, notifier, outcome)
