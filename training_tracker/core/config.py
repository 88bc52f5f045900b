"""Application configuration from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url

from training_tracker.core.enums import RawDurationPolicy


class Settings(BaseSettings):
    """Settings loaded from environment (and .env file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Training Tracker API"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"

    # Database: any async SQLAlchemy URL (sqlite+aiosqlite, postgresql+asyncpg)
    database_url: str = "sqlite+aiosqlite:///./data/training.db"

    # Pool (ignored for SQLite)
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # CORS: comma-separated list of allowed origins in production
    cors_origins: str = ""

    # Owner assumed when a request carries no X-User-Id header (auth lives in front of this API)
    default_user_id: int = 1

    # Rest-time recomputation
    duration_calc_interval_minutes: int = 5
    duration_calc_batch_limit: int = 100
    duration_scheduler_enabled: bool = False
    raw_duration_policy: RawDurationPolicy = RawDurationPolicy.ABSOLUTE

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.database_url).get_backend_name() == "sqlite"

    @property
    def sync_database_url(self) -> str:
        """Synchronous URL for Alembic and tooling (async driver stripped)."""
        url = make_url(self.database_url)
        return url.set(drivername=url.get_backend_name()).render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
