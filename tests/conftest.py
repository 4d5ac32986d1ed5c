"""
tests/conftest.py
Shared fixtures and builders for the test suite.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import database.models as _models  # noqa: F401  registers table metadata
from core.price_limits import PriceLimitConfig
from core.store_model import Item, ItemStack, OfferCategory, StoreData, TradeOffer, TradeStore


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def make_offer(item_name: str | None, price: float, quantity: int = 1) -> TradeOffer:
    """Offer for item_name; None gives a stack without an item."""
    item = Item(item_name) if item_name is not None else None
    return TradeOffer(ItemStack(item, quantity), price)


def make_store(
    controller_id: int,
    sell: list[TradeOffer | None] | None = None,
    buy: list[TradeOffer | None] | None = None,
) -> TradeStore:
    return TradeStore(
        controller_id=controller_id,
        store_data=StoreData(
            sell_categories=[OfferCategory("Sell", list(sell or []))],
            buy_categories=[OfferCategory("Buy", list(buy or []))],
        ),
    )


class MemoryConfigStore:
    """ConfigStore keeping serialized snapshots in memory."""

    def __init__(self, initial: PriceLimitConfig | None = None) -> None:
        self.snapshots: list[dict] = []
        if initial is not None:
            self.snapshots.append(initial.model_dump())

    async def load(self) -> PriceLimitConfig | None:
        if not self.snapshots:
            return None
        return PriceLimitConfig.model_validate(self.snapshots[-1])

    async def save(self, config: PriceLimitConfig) -> None:
        self.snapshots.append(config.model_dump())


@pytest.fixture
def memory_config_store() -> MemoryConfigStore:
    return MemoryConfigStore()


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory over a fresh in-memory SQLite database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()
