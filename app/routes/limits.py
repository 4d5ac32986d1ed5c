"""
app/routes/limits.py
Price limit editing endpoints: the operator's view of the sell floors,
buy ceilings and tick interval.

Every edit goes through the worker's on_config_edited() so the lookup cache
is rebuilt and the configuration persisted before the next cycle.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from app.dependencies import get_worker
from app.services.limit_worker import TradeOfferLimitsWorker
from core.price_limits import ItemPriceLimit, LimitDirection, PriceLimitConfig

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/limits", tags=["limits"])


# ------------------------------------------------------------------
# Request / response models
# ------------------------------------------------------------------

class LimitsResponse(BaseModel):
    """Response for GET /limits."""
    min_sell_prices: list[ItemPriceLimit]
    max_buy_prices: list[ItemPriceLimit]
    tick_interval_seconds: int


class PriceUpdate(BaseModel):
    """Body for PUT /limits/{direction}/{item_name}."""
    price: float


class TickIntervalUpdate(BaseModel):
    """Body for PUT /limits/tick-interval."""
    tick_interval_seconds: int = Field(ge=1)


def _limits_response(config: PriceLimitConfig) -> LimitsResponse:
    return LimitsResponse(
        min_sell_prices=list(config.min_sell_prices),
        max_buy_prices=list(config.max_buy_prices),
        tick_interval_seconds=config.tick_interval_seconds,
    )


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("", response_model=LimitsResponse)
async def get_limits(
    worker: TradeOfferLimitsWorker = Depends(get_worker),
) -> LimitsResponse:
    return _limits_response(worker.config)


@router.put("/tick-interval", response_model=LimitsResponse)
async def set_tick_interval(
    body: TickIntervalUpdate,
    worker: TradeOfferLimitsWorker = Depends(get_worker),
) -> LimitsResponse:
    """Change the interval between correction cycles (the job is re-armed after its next run)."""
    worker.config.tick_interval_seconds = body.tick_interval_seconds
    await worker.on_config_edited()
    logger.info("Tick interval set to %ds", body.tick_interval_seconds)
    return _limits_response(worker.config)


@router.put("/{direction}/{item_name}", response_model=LimitsResponse)
async def set_limit(
    direction: LimitDirection,
    item_name: str,
    body: PriceUpdate,
    worker: TradeOfferLimitsWorker = Depends(get_worker),
) -> LimitsResponse:
    """Set the floor or ceiling for one item, adding the entry if needed."""
    worker.config.set_limit(direction, item_name, body.price)
    await worker.on_config_edited()
    logger.info("Set %s for %s to %s", direction.value, item_name, body.price)
    return _limits_response(worker.config)


@router.delete("/{direction}/{item_name}", response_model=LimitsResponse)
async def remove_limit(
    direction: LimitDirection,
    item_name: str,
    worker: TradeOfferLimitsWorker = Depends(get_worker),
) -> LimitsResponse:
    """Remove an item's entry; the item is unbounded in that direction afterwards."""
    if not worker.config.remove_limit(direction, item_name):
        raise HTTPException(
            status_code=404,
            detail=f"No {direction.value} entry for {item_name}",
        )
    await worker.on_config_edited()
    logger.info("Removed %s for %s", direction.value, item_name)
    return _limits_response(worker.config)
