"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (placeholders only for local runs)
    - get_settings() is cached (lru_cache) — single instance per process
    - store_backend selects exactly one PersistenceStore implementation at startup

Design Decisions:
    - Defaults provided for all non-secret settings: `memory` backend works out-of-the-box
    - An empty admin_password_hash disables login instead of shipping a default password
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from sentinelnav.core.domain_types import (
    StoreBackend, DEFAULT_PROBE_TIMEOUT_MS, DEFAULT_SWEEP_INTERVAL_SECONDS,
)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Storage
    store_backend: StoreBackend = StoreBackend.MEMORY
    data_file: str = "data/sentinel.json"

    database_url: str = "sqlite+aiosqlite:///sentinel.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres URLs come as postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_create_tables: bool = True

    redis_url: str = "redis://localhost:6379/0"
    redis_key_prefix: str = "sentinel"

    blob_url: str = ""
    blob_token: str = ""
    blob_timeout_seconds: float = 10.0

    # Auth
    session_secret: str = "change-me-session-secret"
    challenge_secret: str = "change-me-challenge-secret"
    admin_username: str = "admin"
    admin_password_hash: str = ""
    cookie_secure: bool = False

    # Monitoring
    probe_timeout_ms: int = DEFAULT_PROBE_TIMEOUT_MS
    probe_user_agent: str = "Mozilla/5.0 (compatible; SentinelNav/1.0)"
    sweep_enabled: bool = True
    sweep_interval_seconds: int = DEFAULT_SWEEP_INTERVAL_SECONDS
    sweep_max_instances: int = 3
    sweep_run_on_startup: bool = False
    sweep_persist_results: bool = True

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
