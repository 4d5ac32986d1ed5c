"""
core/price_limits.py
Operator-configured price limits per item and their lookup cache.

Two lists are kept: sell floors (the lowest price a store may sell an item
for) and buy ceilings (the highest price a store may pay for it). Edits only
touch the lists; rebuild_cache() must run afterwards before the worker sees
the change.
"""

from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, NamedTuple

from pydantic import BaseModel, Field, PrivateAttr

from core.constants import (
    DEFAULT_TICK_INTERVAL_SECONDS,
    UNBOUNDED_BUY_CEILING,
    UNBOUNDED_SELL_FLOOR,
)


class LimitDirection(str, Enum):
    SELL_FLOOR = "sell_floor"
    BUY_CEILING = "buy_ceiling"


class ItemPriceLimit(BaseModel):
    """A single (item, limit price) entry."""
    item_name: str
    price: float

    def __str__(self) -> str:
        return f"{self.item_name}: {self.price}"


class LimitTables(NamedTuple):
    """Read-only item → limit lookups, one per direction."""
    sell_floors: Mapping[str, float]
    buy_ceilings: Mapping[str, float]


_EMPTY_TABLES = LimitTables(MappingProxyType({}), MappingProxyType({}))


class PriceLimitConfig(BaseModel):
    """Editable limit configuration plus the derived lookup tables."""

    min_sell_prices: list[ItemPriceLimit] = Field(
        default_factory=list,
        description="The minimum price for selling items to a store",
    )
    max_buy_prices: list[ItemPriceLimit] = Field(
        default_factory=list,
        description="The maximum price for buying items from a store",
    )
    tick_interval_seconds: int = Field(
        default=DEFAULT_TICK_INTERVAL_SECONDS,
        ge=1,
        description="The interval in seconds in which the prices are checked and updated",
    )

    # Swapped as a whole on rebuild, never edited in place
    _tables: LimitTables = PrivateAttr(default_factory=lambda: _EMPTY_TABLES)

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def limit_tables(self) -> LimitTables:
        """Current lookup tables. Stale until rebuild_cache() runs after an edit."""
        return self._tables

    def rebuild_cache(self) -> None:
        # Later entries win when an item appears twice
        sell_floors = {p.item_name: p.price for p in self.min_sell_prices}
        buy_ceilings = {p.item_name: p.price for p in self.max_buy_prices}
        self._tables = LimitTables(
            sell_floors=MappingProxyType(sell_floors),
            buy_ceilings=MappingProxyType(buy_ceilings),
        )

    # ------------------------------------------------------------------
    # Source list edits
    # ------------------------------------------------------------------

    def entries(self, direction: LimitDirection) -> list[ItemPriceLimit]:
        if direction == LimitDirection.SELL_FLOOR:
            return self.min_sell_prices
        return self.max_buy_prices

    def reconcile(self, catalog: Iterable[str]) -> int:
        """
        Add an unbounded default entry for every catalog item missing from
        either list.

        Returns the number of entries appended. Running it again with the
        same catalog appends nothing.
        """
        added = 0
        known_sell = {p.item_name for p in self.min_sell_prices}
        known_buy = {p.item_name for p in self.max_buy_prices}

        for item_name in catalog:
            if item_name not in known_sell:
                self.min_sell_prices.append(
                    ItemPriceLimit(item_name=item_name, price=UNBOUNDED_SELL_FLOOR)
                )
                known_sell.add(item_name)
                added += 1
            if item_name not in known_buy:
                self.max_buy_prices.append(
                    ItemPriceLimit(item_name=item_name, price=UNBOUNDED_BUY_CEILING)
                )
                known_buy.add(item_name)
                added += 1

        return added

    def set_limit(self, direction: LimitDirection, item_name: str, price: float) -> None:
        """Update the item's entry in place, or append one if it has none."""
        for entry in self.entries(direction):
            if entry.item_name == item_name:
                entry.price = price
                return
        self.entries(direction).append(ItemPriceLimit(item_name=item_name, price=price))

    def remove_limit(self, direction: LimitDirection, item_name: str) -> bool:
        entries = self.entries(direction)
        remaining = [p for p in entries if p.item_name != item_name]
        if len(remaining) == len(entries):
            return False
        entries[:] = remaining
        return True
