"""
app/services/limit_worker.py
Background worker that keeps every store's offers inside the configured
sell floors and buy ceilings.

The cycle runs as an APScheduler interval job. Each run takes the current
limit tables, walks all registered stores one after another and clamps
out-of-bounds offers. A failing cycle never stops the schedule: it is logged
and the job is re-armed at one run per hour.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from app.services.config_store import ConfigStore
from app.services.price_corrector import correct_offer_prices
from app.services.recursion_guard import RecursionGuard
from core.constants import (
    DEFAULT_TICK_INTERVAL_SECONDS,
    FAILURE_TICK_INTERVAL_SECONDS,
    STATUS_READY,
)
from core.price_limits import LimitDirection, LimitTables, PriceLimitConfig
from core.store_model import ItemCatalog, Store, StoreRegistry

logger = logging.getLogger(__name__)

JOB_ID = "trade_offer_limits"


class WorkerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SLEEPING = "sleeping"
    CANCELLED = "cancelled"


class CorrectionOutcome(str, Enum):
    CHANGED = "changed"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"          # refused by the recursion guard


@dataclass
class CycleReport:
    """Summary of one correction cycle. error is set when the cycle failed."""
    cycle: int
    stores_seen: int = 0
    stores_changed: int = 0
    stores_skipped: int = 0
    error: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


class TradeOfferLimitsWorker:
    """Periodic price limit enforcement over a store registry."""

    def __init__(
        self,
        registry: StoreRegistry,
        catalog: ItemCatalog,
        config_store: ConfigStore,
        *,
        default_tick_interval_seconds: int = DEFAULT_TICK_INTERVAL_SECONDS,
        scheduler: AsyncIOScheduler | None = None,
    ) -> None:
        self._registry = registry
        self._catalog = catalog
        self._config_store = config_store
        self._scheduler = scheduler

        self.config = PriceLimitConfig(tick_interval_seconds=default_tick_interval_seconds)
        self.guard = RecursionGuard()

        self._state = WorkerState.IDLE
        self._status = ""
        self._cycle = 0

    # ------------------------------------------------------------------
    # Host-facing state
    # ------------------------------------------------------------------

    @property
    def state(self) -> WorkerState:
        return self._state

    @property
    def cycle(self) -> int:
        return self._cycle

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.get_job(JOB_ID) is not None

    def status(self) -> str:
        return self._status

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Load persisted limits, add defaults for new catalog items, persist."""
        loaded = await self._config_store.load()
        if loaded is not None:
            self.config = loaded

        added = self.config.reconcile(self._catalog.all_item_identifiers())
        if added:
            logger.info("Added %d default price limit entries for new catalog items", added)

        self.config.rebuild_cache()
        await self._config_store.save(self.config)
        self._status = STATUS_READY

    async def on_config_edited(self) -> None:
        """Must be called after any edit to the limit lists or tick interval."""
        self.config.rebuild_cache()
        await self._config_store.save(self.config)

    # ------------------------------------------------------------------
    # Correction
    # ------------------------------------------------------------------

    def correct_store(self, store: Store, tables: LimitTables | None = None) -> CorrectionOutcome:
        """
        Clamp one store's sell and buy offers.

        Safe to call from an offer change listener: a nested call for the
        store currently being corrected is refused and returns SKIPPED.
        """
        if tables is None:
            tables = self.config.limit_tables()

        with self.guard.guarded(store.controller_id) as entered:
            if not entered:
                logger.debug("Store %d is already being corrected, skipping", store.controller_id)
                return CorrectionOutcome.SKIPPED

            store_data = store.store_data
            changed = False

            if correct_offer_prices(LimitDirection.SELL_FLOOR, tables.sell_floors, store_data):
                logger.info("Updating sell prices for %d", store.controller_id)
                store_data.changed("sell_categories")
                changed = True

            if correct_offer_prices(LimitDirection.BUY_CEILING, tables.buy_ceilings, store_data):
                logger.info("Updating buy prices for %d", store.controller_id)
                store_data.changed("buy_categories")
                changed = True

            if not changed:
                return CorrectionOutcome.UNCHANGED

            store.refresh_derived_state()
            return CorrectionOutcome.CHANGED

    def run_cycle(self) -> CycleReport:
        """Correct every registered store once, in registry order. Raises on failure."""
        self._cycle += 1
        report = CycleReport(cycle=self._cycle)

        # One snapshot per cycle; edits made meanwhile apply next cycle
        tables = self.config.limit_tables()

        for store in self._registry.all_stores():
            outcome = self.correct_store(store, tables)
            report.stores_seen += 1
            if outcome == CorrectionOutcome.CHANGED:
                report.stores_changed += 1
            elif outcome == CorrectionOutcome.SKIPPED:
                report.stores_skipped += 1

        if report.stores_changed:
            logger.info(
                "Cycle %d: corrected %d of %d stores",
                report.cycle, report.stores_changed, report.stores_seen,
            )
        return report

    def run_cycle_safely(self) -> CycleReport:
        """
        Run one cycle behind the failure boundary.

        Any exception is logged, recorded in the status and the report, and
        widens the tick interval to one hour. Nothing propagates.
        """
        try:
            report = self.run_cycle()
        except Exception as exc:
            self.config.tick_interval_seconds = FAILURE_TICK_INTERVAL_SECONDS
            self._status = f"Last cycle failed: {exc}"
            logger.exception(
                "Price limit cycle %d failed, tick interval set to %ds",
                self._cycle, FAILURE_TICK_INTERVAL_SECONDS,
            )
            self._rearm()
            return CycleReport(cycle=self._cycle, error=str(exc))

        self._status = STATUS_READY
        return report

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    async def do_work(self) -> CycleReport:
        """Scheduled job: one cycle, then re-arm the job at the current tick interval."""
        self._state = WorkerState.RUNNING
        report = self.run_cycle_safely()
        self._rearm()
        self._state = WorkerState.SLEEPING if self.is_running else WorkerState.IDLE
        return report

    def scheduled_interval(self) -> timedelta | None:
        """Interval the job is currently armed with, or None when not scheduled."""
        if self._scheduler is None:
            return None
        job = self._scheduler.get_job(JOB_ID)
        return job.trigger.interval if job is not None else None

    def _rearm(self) -> None:
        armed = self.scheduled_interval()
        seconds = self.config.tick_interval_seconds
        if armed is None or armed == timedelta(seconds=seconds):
            return
        self._scheduler.reschedule_job(JOB_ID, trigger="interval", seconds=seconds)
        logger.info("Trade offer limits job re-armed: tick every %ds", seconds)

    async def start(self, tick_interval_seconds: int | None = None) -> None:
        """Schedule the cycle job; the first cycle runs immediately."""
        if self.is_running:
            logger.warning("Trade offer limits worker already running")
            return

        if tick_interval_seconds is not None:
            if tick_interval_seconds < 1:
                raise ValueError("tick_interval_seconds must be >= 1")
            self.config.tick_interval_seconds = tick_interval_seconds
            await self.on_config_edited()

        if self._scheduler is None:
            self._scheduler = AsyncIOScheduler()

        self._scheduler.add_job(
            self.do_work,
            "interval",
            seconds=self.config.tick_interval_seconds,
            id=JOB_ID,
            name="Trade Offer Limits",
            next_run_time=datetime.now(timezone.utc),
            max_instances=1,
            coalesce=True,
        )
        if not self._scheduler.running:
            self._scheduler.start()

        self._state = WorkerState.SLEEPING
        logger.info(
            "Trade offer limits worker started: tick every %ds",
            self.config.tick_interval_seconds,
        )

    def cancel(self) -> None:
        """Remove the cycle job; the scheduler itself keeps running."""
        if self.is_running:
            self._scheduler.remove_job(JOB_ID)
            self._state = WorkerState.CANCELLED
            logger.info("Trade offer limits worker cancelled after cycle %d", self._cycle)

    def stop(self) -> None:
        """Remove the job and shut the scheduler down."""
        if self._scheduler is None:
            return

        self.cancel()
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
        self._state = WorkerState.CANCELLED
        logger.info("Trade offer limits worker stopped")
