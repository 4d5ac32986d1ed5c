"""
core/config.py
Environment-based configuration using pydantic-settings.
Loads from .env file automatically.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings

from core.constants import DEFAULT_TICK_INTERVAL_SECONDS


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # --- Database ---
    DATABASE_URL: str = "sqlite+aiosqlite:///./trade_offer_limits.db"

    # --- Worker ---
    # Only used when no interval has been persisted yet
    TICK_INTERVAL_SECONDS: int = DEFAULT_TICK_INTERVAL_SECONDS
    WORKER_AUTOSTART: bool = True

    # --- Item catalog (JSON list in env, e.g. ITEM_CATALOG='["Wood","Coal"]') ---
    ITEM_CATALOG: list[str] = []

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    model_config = {
        "env_file": ".env",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Singleton access to application settings."""
    return Settings()
