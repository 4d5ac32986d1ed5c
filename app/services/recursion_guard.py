"""
app/services/recursion_guard.py
Single-slot re-entry guard keyed by a store's controller id.

Raising or lowering an offer price notifies listeners synchronously, and a
listener can ask for the same store to be corrected again before the first
correction has returned. The guard refuses that nested attempt.

It holds one id at a time. Stores are corrected one after another inside a
cycle, so one slot is enough.
"""

from collections.abc import Iterator
from contextlib import contextmanager


class RecursionGuard:
    def __init__(self) -> None:
        self._active_id: int | None = None

    @property
    def active_id(self) -> int | None:
        return self._active_id

    def try_enter(self, store_id: int) -> bool:
        """Occupy the slot unless this store is already being corrected."""
        if self._active_id == store_id:
            return False
        self._active_id = store_id
        return True

    def leave(self) -> None:
        self._active_id = None

    @contextmanager
    def guarded(self, store_id: int) -> Iterator[bool]:
        """
        Yield True when the store was entered, False when refused.

        The slot is released on every exit path, but only by the attempt
        that occupied it.
        """
        entered = self.try_enter(store_id)
        try:
            yield entered
        finally:
            if entered:
                self.leave()
