"""
tests/test_price_limits.py
Tests for the limit configuration: cache rebuild, reconciliation and edits.
"""

import pytest

from core.constants import UNBOUNDED_BUY_CEILING, UNBOUNDED_SELL_FLOOR
from core.price_limits import ItemPriceLimit, LimitDirection, PriceLimitConfig


def _config(sell: dict[str, float] | None = None, buy: dict[str, float] | None = None) -> PriceLimitConfig:
    return PriceLimitConfig(
        min_sell_prices=[ItemPriceLimit(item_name=k, price=v) for k, v in (sell or {}).items()],
        max_buy_prices=[ItemPriceLimit(item_name=k, price=v) for k, v in (buy or {}).items()],
    )


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------

class TestLimitCache:
    def test_empty_before_first_rebuild(self):
        """A fresh config exposes empty tables until rebuilt."""
        config = _config(sell={"Wood": 10.0})
        tables = config.limit_tables()
        assert dict(tables.sell_floors) == {}
        assert dict(tables.buy_ceilings) == {}

    def test_rebuild_builds_both_tables(self):
        config = _config(sell={"Wood": 10.0}, buy={"Coal": 50.0})
        config.rebuild_cache()
        tables = config.limit_tables()
        assert tables.sell_floors == {"Wood": 10.0}
        assert tables.buy_ceilings == {"Coal": 50.0}

    def test_stale_until_rebuilt(self):
        """Edits to the lists are invisible to readers until rebuild_cache()."""
        config = _config(sell={"Wood": 10.0})
        config.rebuild_cache()

        config.set_limit(LimitDirection.SELL_FLOOR, "Wood", 25.0)
        assert config.limit_tables().sell_floors["Wood"] == 10.0

        config.rebuild_cache()
        assert config.limit_tables().sell_floors["Wood"] == 25.0

    def test_rebuild_swaps_instead_of_mutating(self):
        """A reference taken before a rebuild keeps its old contents."""
        config = _config(sell={"Wood": 10.0})
        config.rebuild_cache()
        before = config.limit_tables()

        config.set_limit(LimitDirection.SELL_FLOOR, "Wood", 30.0)
        config.rebuild_cache()

        assert before.sell_floors["Wood"] == 10.0
        assert config.limit_tables() is not before

    def test_duplicate_entries_last_wins(self):
        config = PriceLimitConfig(
            min_sell_prices=[
                ItemPriceLimit(item_name="Wood", price=5.0),
                ItemPriceLimit(item_name="Wood", price=7.0),
            ],
        )
        config.rebuild_cache()
        assert config.limit_tables().sell_floors["Wood"] == 7.0

    def test_tables_are_read_only(self):
        config = _config(sell={"Wood": 10.0})
        config.rebuild_cache()
        with pytest.raises(TypeError):
            config.limit_tables().sell_floors["Wood"] = 1.0  # type: ignore[index]


# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------

class TestReconcile:
    def test_adds_unbounded_defaults(self):
        config = PriceLimitConfig()
        added = config.reconcile(["Wood", "Coal"])

        assert added == 4
        assert [(p.item_name, p.price) for p in config.min_sell_prices] == [
            ("Wood", UNBOUNDED_SELL_FLOOR),
            ("Coal", UNBOUNDED_SELL_FLOOR),
        ]
        assert [(p.item_name, p.price) for p in config.max_buy_prices] == [
            ("Wood", UNBOUNDED_BUY_CEILING),
            ("Coal", UNBOUNDED_BUY_CEILING),
        ]

    def test_keeps_existing_entries(self):
        """Configured limits are never overwritten by defaults."""
        config = _config(sell={"Wood": 10.0})
        config.reconcile(["Wood"])

        assert [(p.item_name, p.price) for p in config.min_sell_prices] == [("Wood", 10.0)]
        assert [(p.item_name, p.price) for p in config.max_buy_prices] == [
            ("Wood", UNBOUNDED_BUY_CEILING)
        ]

    def test_idempotent(self):
        catalog = ["Wood", "Coal", "Stone"]
        once = PriceLimitConfig()
        once.reconcile(catalog)

        twice = PriceLimitConfig()
        twice.reconcile(catalog)
        assert twice.reconcile(catalog) == 0

        assert twice.min_sell_prices == once.min_sell_prices
        assert twice.max_buy_prices == once.max_buy_prices

    def test_repeated_catalog_item_added_once(self):
        config = PriceLimitConfig()
        config.reconcile(["Wood", "Wood"])
        assert len(config.min_sell_prices) == 1
        assert len(config.max_buy_prices) == 1

    def test_defaults_do_not_bound_anything(self):
        config = PriceLimitConfig()
        config.reconcile(["Wood"])
        config.rebuild_cache()
        tables = config.limit_tables()
        assert tables.sell_floors["Wood"] < 0.0
        assert tables.buy_ceilings["Wood"] > 1_000.0


# ---------------------------------------------------------------------------
# Edits
# ---------------------------------------------------------------------------

class TestEdits:
    def test_set_limit_updates_in_place(self):
        config = _config(buy={"Coal": 50.0, "Wood": 8.0})
        config.set_limit(LimitDirection.BUY_CEILING, "Coal", 40.0)

        assert [(p.item_name, p.price) for p in config.max_buy_prices] == [
            ("Coal", 40.0),
            ("Wood", 8.0),
        ]

    def test_set_limit_appends_new_item(self):
        config = PriceLimitConfig()
        config.set_limit(LimitDirection.SELL_FLOOR, "Iron", 3.5)
        assert config.min_sell_prices == [ItemPriceLimit(item_name="Iron", price=3.5)]
        assert config.max_buy_prices == []

    def test_remove_limit(self):
        config = _config(sell={"Wood": 10.0, "Coal": 2.0})
        assert config.remove_limit(LimitDirection.SELL_FLOOR, "Wood") is True
        assert [p.item_name for p in config.min_sell_prices] == ["Coal"]

    def test_remove_missing_limit(self):
        config = _config(sell={"Wood": 10.0})
        assert config.remove_limit(LimitDirection.BUY_CEILING, "Wood") is False
        assert len(config.min_sell_prices) == 1

    def test_tick_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            PriceLimitConfig(tick_interval_seconds=0)
