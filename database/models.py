"""
database/models.py
SQLModel table definitions for the persisted price limit configuration.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field

from core.constants import DEFAULT_TICK_INTERVAL_SECONDS
from core.price_limits import LimitDirection


def _utcnow() -> datetime:
    """Timezone-aware UTC now."""
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# ItemPriceLimitRecord: one row per entry of either limit list
# ---------------------------------------------------------------------------

class ItemPriceLimitRecord(SQLModel, table=True):
    """A persisted sell-floor or buy-ceiling entry."""

    id: Optional[int] = Field(default=None, primary_key=True)

    direction: LimitDirection = Field(index=True)
    item_name: str = Field(index=True)
    price: float

    # Insertion order within the list, kept for display
    position: int


# ---------------------------------------------------------------------------
# LimitSettings: single row holding the scalar settings
# ---------------------------------------------------------------------------

class LimitSettings(SQLModel, table=True):
    """Scalar part of the limit configuration (always id=1)."""

    id: Optional[int] = Field(default=None, primary_key=True)
    tick_interval_seconds: int = DEFAULT_TICK_INTERVAL_SECONDS
    updated_at: datetime = Field(default_factory=_utcnow)
