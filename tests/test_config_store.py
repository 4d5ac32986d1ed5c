"""
tests/test_config_store.py
Tests for persisting the limit configuration through SQLModel tables.
"""

import pytest

from app.services.config_store import SqlConfigStore
from core.price_limits import ItemPriceLimit, LimitDirection, PriceLimitConfig


@pytest.mark.asyncio
class TestSqlConfigStore:
    async def test_load_empty_database(self, session_factory):
        """Nothing saved yet → load() returns None."""
        store = SqlConfigStore(session_factory)
        assert await store.load() is None

    async def test_save_then_load(self, session_factory):
        store = SqlConfigStore(session_factory)
        config = PriceLimitConfig(
            min_sell_prices=[
                ItemPriceLimit(item_name="Wood", price=10.0),
                ItemPriceLimit(item_name="Coal", price=-100_000.0),
            ],
            max_buy_prices=[ItemPriceLimit(item_name="Coal", price=50.0)],
            tick_interval_seconds=300,
        )

        await store.save(config)
        loaded = await store.load()

        assert loaded is not None
        assert loaded.min_sell_prices == config.min_sell_prices
        assert loaded.max_buy_prices == config.max_buy_prices
        assert loaded.tick_interval_seconds == 300

    async def test_save_replaces_previous_snapshot(self, session_factory):
        store = SqlConfigStore(session_factory)
        config = PriceLimitConfig()
        config.set_limit(LimitDirection.SELL_FLOOR, "Wood", 10.0)
        config.set_limit(LimitDirection.SELL_FLOOR, "Iron", 4.0)
        await store.save(config)

        config.remove_limit(LimitDirection.SELL_FLOOR, "Wood")
        config.tick_interval_seconds = 45
        await store.save(config)

        loaded = await store.load()
        assert [p.item_name for p in loaded.min_sell_prices] == ["Iron"]
        assert loaded.tick_interval_seconds == 45

    async def test_loaded_config_needs_rebuild(self, session_factory):
        """Loaded configs come back with an empty cache; callers rebuild."""
        store = SqlConfigStore(session_factory)
        config = PriceLimitConfig()
        config.set_limit(LimitDirection.BUY_CEILING, "Coal", 50.0)
        await store.save(config)

        loaded = await store.load()
        assert dict(loaded.limit_tables().buy_ceilings) == {}
        loaded.rebuild_cache()
        assert loaded.limit_tables().buy_ceilings["Coal"] == 50.0
