"""Runtime settings, read from ``STOREFRONT_*`` environment variables or ``.env``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STOREFRONT_", env_file=".env")

    # Relative paths resolve against the working directory.
    data_dir: Path = Path("data")
    store_lock_timeout: float = Field(default=10.0, gt=0)
    log_level: str = "WARNING"

    order_number_prefix: str = "ZE"
    order_number_attempts: int = Field(default=5, ge=1)
    stock_update_attempts: int = Field(default=3, ge=1)
    strict_status_transitions: bool = True
    default_list_limit: int = Field(default=50, ge=1)

    low_stock_threshold: int = Field(default=10, ge=0)
    critical_stock_threshold: int = Field(default=5, ge=0)


@lru_cache
def get_settings() -> Settings:
    return Settings()
