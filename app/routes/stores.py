"""
app/routes/stores.py
Store endpoints: register in-process stores and inspect their offers.
"""

import logging
from collections import defaultdict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.dependencies import get_registry
from app.services.store_registry import InMemoryStoreRegistry
from core.store_model import Item, ItemStack, OfferCategory, StoreData, TradeOffer, TradeStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/stores", tags=["stores"])


# ------------------------------------------------------------------
# Request / response models
# ------------------------------------------------------------------

class OfferRow(BaseModel):
    """A single offer. item_name may be null for an empty stack."""
    category: str = "General"
    item_name: str | None
    quantity: int = 0
    price: float


class StoreRow(BaseModel):
    """A store with its offers."""
    controller_id: int
    name: str
    revision: int
    sell_offers: list[OfferRow]
    buy_offers: list[OfferRow]


class StoresResponse(BaseModel):
    """Response for GET /stores."""
    count: int
    stores: list[StoreRow]


class StoreCreate(BaseModel):
    """Body for POST /stores."""
    controller_id: int
    name: str = ""
    sell_offers: list[OfferRow] = []
    buy_offers: list[OfferRow] = []


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _build_categories(rows: list[OfferRow]) -> list[OfferCategory]:
    grouped: dict[str, list[TradeOffer | None]] = defaultdict(list)
    for row in rows:
        item = Item(row.item_name) if row.item_name is not None else None
        grouped[row.category].append(
            TradeOffer(ItemStack(item, row.quantity), row.price)
        )
    return [OfferCategory(name, offers) for name, offers in grouped.items()]


def _offer_rows(categories: list[OfferCategory]) -> list[OfferRow]:
    return [
        OfferRow(
            category=category.name,
            item_name=offer.item_name,
            quantity=offer.stack.quantity if offer.stack else 0,
            price=offer.price,
        )
        for category in categories
        for offer in category.offers
        if offer is not None
    ]


def _store_to_row(store: TradeStore) -> StoreRow:
    return StoreRow(
        controller_id=store.controller_id,
        name=store.name,
        revision=store.revision,
        sell_offers=_offer_rows(store.store_data.sell_categories),
        buy_offers=_offer_rows(store.store_data.buy_categories),
    )


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("", response_model=StoresResponse)
async def list_stores(
    registry: InMemoryStoreRegistry = Depends(get_registry),
) -> StoresResponse:
    stores = [_store_to_row(s) for s in registry.all_stores()]
    return StoresResponse(count=len(stores), stores=stores)


@router.post("", response_model=StoreRow, status_code=201)
async def register_store(
    body: StoreCreate,
    registry: InMemoryStoreRegistry = Depends(get_registry),
) -> StoreRow:
    """Register a store; its offers are corrected from the next cycle on."""
    store = TradeStore(
        controller_id=body.controller_id,
        store_data=StoreData(
            sell_categories=_build_categories(body.sell_offers),
            buy_categories=_build_categories(body.buy_offers),
        ),
        name=body.name,
    )
    try:
        registry.register(store)
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return _store_to_row(store)


@router.delete("/{controller_id}", status_code=204)
async def unregister_store(
    controller_id: int,
    registry: InMemoryStoreRegistry = Depends(get_registry),
) -> None:
    if registry.unregister(controller_id) is None:
        raise HTTPException(status_code=404, detail=f"Store {controller_id} not found")
    logger.info("Unregistered store %d", controller_id)
