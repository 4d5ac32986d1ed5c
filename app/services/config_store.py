"""
app/services/config_store.py
Loads and saves the price limit configuration through SQLModel tables.

Each save replaces the stored snapshot: both limit lists are rewritten in
list order, and the single settings row is upserted.
"""

import logging
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select, col

from core.price_limits import ItemPriceLimit, LimitDirection, PriceLimitConfig
from database.models import ItemPriceLimitRecord, LimitSettings

logger = logging.getLogger(__name__)

_SETTINGS_ROW_ID = 1


class ConfigStore(Protocol):
    async def load(self) -> PriceLimitConfig | None:
        ...

    async def save(self, config: PriceLimitConfig) -> None:
        ...


class SqlConfigStore:
    """ConfigStore backed by an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def load(self) -> PriceLimitConfig | None:
        """Return the persisted config, or None if nothing was saved yet."""
        async with self._session_factory() as session:
            settings_row = await session.get(LimitSettings, _SETTINGS_ROW_ID)
            if settings_row is None:
                return None

            rows = (await session.execute(
                select(ItemPriceLimitRecord).order_by(col(ItemPriceLimitRecord.position))
            )).scalars().all()

        config = PriceLimitConfig(tick_interval_seconds=settings_row.tick_interval_seconds)
        for row in rows:
            config.entries(row.direction).append(
                ItemPriceLimit(item_name=row.item_name, price=row.price)
            )

        logger.info(
            "Loaded price limits: %d sell floors, %d buy ceilings, tick=%ds",
            len(config.min_sell_prices),
            len(config.max_buy_prices),
            config.tick_interval_seconds,
        )
        return config

    async def save(self, config: PriceLimitConfig) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(ItemPriceLimitRecord))

            for direction in LimitDirection:
                for position, entry in enumerate(config.entries(direction)):
                    session.add(ItemPriceLimitRecord(
                        direction=direction,
                        item_name=entry.item_name,
                        price=entry.price,
                        position=position,
                    ))

            settings_row = await session.get(LimitSettings, _SETTINGS_ROW_ID)
            if settings_row is None:
                settings_row = LimitSettings(id=_SETTINGS_ROW_ID)
            settings_row.tick_interval_seconds = config.tick_interval_seconds
            settings_row.updated_at = datetime.now(timezone.utc)
            session.add(settings_row)

            await session.commit()

        logger.debug("Saved price limit configuration")
