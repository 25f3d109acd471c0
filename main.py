# main.py
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

ROOT_DIR = Path(__file__).resolve().parent
sys.path.append(str(ROOT_DIR))

from config import Settings, settings as default_settings
from routes import inventory
from services.sync_controller import SyncController
from store_service import RecordStoreClient
from utils import get_logger

logger = get_logger("app")


def create_app(settings: Optional[Settings] = None, store: Optional[RecordStoreClient] = None) -> FastAPI:
    """
    Builds the web app around a single sync controller.

    The inventory is fetched once on startup; after that only user actions
    trigger a reload.
    """
    settings = settings or default_settings
    store = store or RecordStoreClient(
        store_url=settings.store_url,
        api_key=settings.store_key,
        table=settings.store_table,
        timeout=settings.store_timeout,
    )
    controller = SyncController(
        store,
        clear_session_on_store_error=settings.clear_session_on_store_error,
        reject_negative_values=settings.reject_negative_values,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Loading inventory from table '%s'", settings.store_table)
        await controller.refresh()
        yield

    app = FastAPI(title=settings.app_title, lifespan=lifespan)
    app.state.controller = controller
    app.state.settings = settings

    app.mount("/static", StaticFiles(directory=str(ROOT_DIR / "static")), name="static")

    # Routers
    app.include_router(inventory.router)
    return app


app = create_app()
