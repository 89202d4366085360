"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - Every setting has a default, so the service runs out-of-the-box on SQLite
    - These are deployment settings; per-user settings (retentionHours, popupWidth)
      live in the item store

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - TEMPTABS_ env prefix keeps variables from colliding with other services
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from temptabs.core.domain_types import MAX_EXPIRY_HOURS


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="TEMPTABS_", case_sensitive=False,
    )

    # Store
    store_backend: Literal["sql", "memory"] = "sql"
    database_url: str = "sqlite+aiosqlite:///./temptabs.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres URLs come as postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    # Creates kv_records on startup when alembic has not been run (local SQLite)
    database_auto_create: bool = True

    # Items
    default_retention_hours: float = Field(24, gt=0, le=MAX_EXPIRY_HOURS)
    max_items: int = Field(500, ge=1)
    badge_warning_margin: int = Field(50, ge=0)

    # Periodic refresh
    cleanup_interval_minutes: float = Field(30, gt=0)
    cleanup_on_start: bool = True

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
