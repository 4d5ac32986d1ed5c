"""
app/services/price_corrector.py
Clamps store offers to the configured sell floors / buy ceilings.

Pure logic: no I/O, no logging. The caller decides what to do with the
returned "changed" flag.
"""

from collections.abc import Mapping

from core.price_limits import LimitDirection
from core.store_model import OfferCategory, StoreData, TradeOffer


def _categories(direction: LimitDirection, store_data: StoreData) -> list[OfferCategory]:
    if direction == LimitDirection.SELL_FLOOR:
        return store_data.sell_categories
    return store_data.buy_categories


def _violates(direction: LimitDirection, price: float, limit: float) -> bool:
    if direction == LimitDirection.SELL_FLOOR:
        return price < limit
    return price > limit


def _is_inert(offer: TradeOffer | None) -> bool:
    return offer is None or offer.stack is None or offer.stack.item is None


def correct_offer_prices(
    direction: LimitDirection,
    limits: Mapping[str, float],
    store_data: StoreData,
) -> bool:
    """
    Set every out-of-bounds offer in the relevant categories to exactly its limit.

    SELL_FLOOR raises sell offers priced below the item's floor.
    BUY_CEILING lowers buy offers priced above the item's ceiling.
    Items without an entry in `limits` are left alone.

    Returns True if at least one offer price was changed.
    """
    changed = False

    for category in _categories(direction, store_data):
        # Snapshot: a price listener may edit the category while we iterate
        for offer in list(category.offers):
            if _is_inert(offer):
                continue

            limit = limits.get(offer.stack.item.name)
            if limit is None or not _violates(direction, offer.price, limit):
                continue

            offer.price = limit
            offer.changed("price")
            changed = True

    return changed
