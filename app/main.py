"""
app/main.py
FastAPI entry point for the trade offer limits service.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from datetime import datetime, timezone

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.routes.limits import router as limits_router
from app.routes.stores import router as stores_router
from app.routes.worker import router as worker_router
from app.services.config_store import SqlConfigStore
from app.services.limit_worker import TradeOfferLimitsWorker
from app.services.store_registry import InMemoryStoreRegistry, StaticItemCatalog
from core.config import get_settings
from core.constants import SYSTEM_VERSION
from core.logging_config import setup_logging
from database.connection import async_session, get_session, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: create tables, initialize and start the worker. Shutdown: stop it."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    await init_db()
    logger.info("Database initialized, tables created")

    registry = InMemoryStoreRegistry()
    worker = TradeOfferLimitsWorker(
        registry=registry,
        catalog=StaticItemCatalog(settings.ITEM_CATALOG),
        config_store=SqlConfigStore(async_session),
        default_tick_interval_seconds=settings.TICK_INTERVAL_SECONDS,
    )
    await worker.initialize()

    app.state.registry = registry
    app.state.worker = worker

    if settings.WORKER_AUTOSTART:
        await worker.start()
    yield
    worker.stop()


app = FastAPI(
    title="Trade Offer Limits API",
    version=SYSTEM_VERSION,
    lifespan=lifespan,
)

app.include_router(limits_router)
app.include_router(stores_router)
app.include_router(worker_router)


@app.get("/health")
async def health_check(session: AsyncSession = Depends(get_session)) -> dict:
    """Prove the API and database are alive."""
    try:
        await session.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "db": "connected",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    except Exception as exc:
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "db": str(exc),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
