"""
core/constants.py
Hard-coded bounds and system constants for the trade offer limits worker.
These values are NOT configurable via environment.
"""

from typing import Final

# ---------------------------------------------------------------------------
# Default bounds written for items the operator has not configured yet
# ---------------------------------------------------------------------------
UNBOUNDED_SELL_FLOOR: Final[float] = -100_000.0     # effectively no floor
UNBOUNDED_BUY_CEILING: Final[float] = 100_000.0     # effectively no ceiling

# ---------------------------------------------------------------------------
# Worker timing
# ---------------------------------------------------------------------------
DEFAULT_TICK_INTERVAL_SECONDS: Final[int] = 600     # 10 minutes between cycles
FAILURE_TICK_INTERVAL_SECONDS: Final[int] = 3600    # fallback after a failed cycle

# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------
STATUS_READY: Final[str] = "Ready."
PLUGIN_CATEGORY: Final[str] = "TradeOfferLimits"
SYSTEM_VERSION: Final[str] = "v1.0-trade-offer-limits"
