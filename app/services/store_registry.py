"""
app/services/store_registry.py
In-process store registry and item catalog used by the API host.
"""

import logging
from collections.abc import Iterable, Sequence

from core.store_model import Store

logger = logging.getLogger(__name__)


class InMemoryStoreRegistry:
    """Stores keyed by controller id, enumerated in registration order."""

    def __init__(self, stores: Iterable[Store] = ()) -> None:
        self._stores: dict[int, Store] = {}
        for store in stores:
            self.register(store)

    def register(self, store: Store) -> None:
        if store.controller_id in self._stores:
            raise ValueError(f"Store {store.controller_id} is already registered")
        self._stores[store.controller_id] = store
        logger.info("Registered store %d", store.controller_id)

    def unregister(self, controller_id: int) -> Store | None:
        return self._stores.pop(controller_id, None)

    def all_stores(self) -> Sequence[Store]:
        # Copy so a store registered mid-cycle waits for the next one
        return list(self._stores.values())


class StaticItemCatalog:
    """Fixed list of item names, de-duplicated in first-seen order."""

    def __init__(self, item_names: Iterable[str]) -> None:
        self._item_names = list(dict.fromkeys(item_names))

    def all_item_identifiers(self) -> Sequence[str]:
        return list(self._item_names)
