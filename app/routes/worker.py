"""
app/routes/worker.py
Worker lifecycle endpoints: status, start, cancel, manual cycle.
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.dependencies import get_worker
from app.services.limit_worker import TradeOfferLimitsWorker
from core.constants import PLUGIN_CATEGORY

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/worker", tags=["worker"])


# ------------------------------------------------------------------
# Request / response models
# ------------------------------------------------------------------

class WorkerStatusResponse(BaseModel):
    """Response for GET /worker/status."""
    category: str
    status: str
    state: str
    cycle: int
    running: bool
    tick_interval_seconds: int


class StartRequest(BaseModel):
    """Optional body for POST /worker/start."""
    tick_interval_seconds: int | None = Field(default=None, ge=1)


class CycleReportResponse(BaseModel):
    """Response for POST /worker/run-cycle."""
    cycle: int
    stores_seen: int
    stores_changed: int
    stores_skipped: int
    status: str
    error: str | None = None


def _status_response(worker: TradeOfferLimitsWorker) -> WorkerStatusResponse:
    return WorkerStatusResponse(
        category=PLUGIN_CATEGORY,
        status=worker.status(),
        state=worker.state.value,
        cycle=worker.cycle,
        running=worker.is_running,
        tick_interval_seconds=worker.config.tick_interval_seconds,
    )


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("/status", response_model=WorkerStatusResponse)
async def worker_status(
    worker: TradeOfferLimitsWorker = Depends(get_worker),
) -> WorkerStatusResponse:
    return _status_response(worker)


@router.post("/start", response_model=WorkerStatusResponse)
async def start_worker(
    body: StartRequest | None = None,
    worker: TradeOfferLimitsWorker = Depends(get_worker),
) -> WorkerStatusResponse:
    """Schedule the cycle job. No-op if it is already running."""
    await worker.start(body.tick_interval_seconds if body else None)
    return _status_response(worker)


@router.post("/cancel", response_model=WorkerStatusResponse)
async def cancel_worker(
    worker: TradeOfferLimitsWorker = Depends(get_worker),
) -> WorkerStatusResponse:
    """Remove the cycle job and shut the scheduler down."""
    worker.stop()
    return _status_response(worker)


@router.post("/run-cycle", response_model=CycleReportResponse)
async def run_cycle(
    worker: TradeOfferLimitsWorker = Depends(get_worker),
) -> CycleReportResponse:
    """Run one correction cycle immediately, outside the schedule.

    A failing cycle is reported in the body, never as a server error.
    """
    logger.info("Manual correction cycle triggered")
    report = worker.run_cycle_safely()
    return CycleReportResponse(**report.to_dict(), status=worker.status())
