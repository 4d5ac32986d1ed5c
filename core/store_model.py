"""
core/store_model.py
Store and offer model the limit worker operates on, plus the collaborator
contracts it needs (store registry, item catalog).

Offers and store data notify listeners synchronously when changed. A listener
may call straight back into the worker, which is why store correction is
guarded against re-entry.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Protocol, Sequence

ChangeListener = Callable[[object, str], None]


class ChangeNotifier:
    """Minimal observable: listeners receive (source, property_name)."""

    def __init__(self) -> None:
        self._listeners: list[ChangeListener] = []

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def changed(self, property_name: str) -> None:
        for listener in list(self._listeners):
            listener(self, property_name)


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Item:
    name: str


@dataclass
class ItemStack:
    item: Optional[Item]
    quantity: int = 0


# ---------------------------------------------------------------------------
# Offers and categories
# ---------------------------------------------------------------------------

class TradeOffer(ChangeNotifier):
    """A priced stack listed for sale or purchase in a store."""

    def __init__(self, stack: Optional[ItemStack], price: float) -> None:
        super().__init__()
        self.stack = stack
        self.price = price

    @property
    def item_name(self) -> Optional[str]:
        if self.stack is None or self.stack.item is None:
            return None
        return self.stack.item.name

    def __repr__(self) -> str:
        return f"TradeOffer(item={self.item_name!r}, price={self.price})"


@dataclass
class OfferCategory:
    name: str
    offers: list[Optional[TradeOffer]] = field(default_factory=list)


class StoreData(ChangeNotifier):
    """Sell and buy categories of one store, mutated in place."""

    def __init__(
        self,
        sell_categories: Iterable[OfferCategory] = (),
        buy_categories: Iterable[OfferCategory] = (),
    ) -> None:
        super().__init__()
        self.sell_categories: list[OfferCategory] = list(sell_categories)
        self.buy_categories: list[OfferCategory] = list(buy_categories)

    def all_offers(self) -> list[TradeOffer]:
        return [
            offer
            for category in (*self.sell_categories, *self.buy_categories)
            for offer in category.offers
            if offer is not None
        ]


# ---------------------------------------------------------------------------
# Collaborator contracts
# ---------------------------------------------------------------------------

class Store(Protocol):
    """What the worker needs from a store."""

    controller_id: int
    store_data: StoreData

    def refresh_derived_state(self) -> None:
        """Recompute stock/availability after offer prices changed."""
        ...


class StoreRegistry(Protocol):
    def all_stores(self) -> Sequence[Store]:
        ...


class ItemCatalog(Protocol):
    def all_item_identifiers(self) -> Sequence[str]:
        ...


# ---------------------------------------------------------------------------
# Default store implementation
# ---------------------------------------------------------------------------

class TradeStore:
    """
    In-process store. Derived state is the set of items it currently lists
    and a revision counter bumped on every refresh.
    """

    def __init__(self, controller_id: int, store_data: StoreData, name: str = "") -> None:
        self.controller_id = controller_id
        self.store_data = store_data
        self.name = name or f"store-{controller_id}"
        self.revision = 0
        self.listed_items: frozenset[str] = frozenset()
        self.refresh_derived_state()

    def refresh_derived_state(self) -> None:
        self.listed_items = frozenset(
            offer.item_name
            for offer in self.store_data.all_offers()
            if offer.item_name is not None
        )
        self.revision += 1
