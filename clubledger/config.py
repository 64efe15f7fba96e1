"""Application configuration management."""
from pydantic import model_validator, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from sqlalchemy.engine.url import make_url, URL
from typing import Optional
import logging

SQLITE_LOCAL_URL = "sqlite+aiosqlite:///./clubledger.db"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = SQLITE_LOCAL_URL
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # Redis (optional, falls back to in-process locks)
    redis_url: str = ""

    # Application
    environment: str = "development"
    frontend_url: str = "http://localhost:3000"
    staff_user_header: str = "X-Staff-User-Id"

    # Ledger
    ledger_lock_timeout_seconds: float = 10.0  # Max wait for a per-channel write lock
    transaction_list_default_limit: int = 100
    transaction_list_max_limit: int = 500
    rake_history_limit: int = 50  # Records returned per table session
    currency_symbol: str = "$"

    @field_validator("currency_symbol", mode="before")
    @classmethod
    def parse_currency_symbol(cls, value):
        """Fall back to the dollar sign when the variable is blank."""
        if value is None or not str(value).strip():
            return "$"
        return str(value).strip()

    @model_validator(mode="after")
    def validate_all_config(self):
        """Validate ledger limits and normalize Postgres URLs."""
        logger = logging.getLogger(__name__)

        if self.ledger_lock_timeout_seconds <= 0:
            raise ValueError("ledger_lock_timeout_seconds must be positive")

        if self.transaction_list_default_limit < 1:
            raise ValueError("transaction_list_default_limit must be at least 1")

        if self.transaction_list_max_limit < self.transaction_list_default_limit:
            raise ValueError("transaction_list_max_limit must be >= transaction_list_default_limit")

        if self.rake_history_limit < 1:
            raise ValueError("rake_history_limit must be at least 1")

        # Database URL normalization
        url = self.database_url
        if not url:
            logger.warning("Empty DATABASE_URL, using SQLite fallback")
            self.database_url = SQLITE_LOCAL_URL
            return self

        parsed: Optional[URL] = None
        try:
            parsed = make_url(url)
        except Exception as e:  # pragma: no cover - defensive fallback
            logger.error(f"Failed to parse DATABASE_URL: {e}")
            logger.warning("Invalid DATABASE_URL; falling back to default sqlite database.")
            self.database_url = SQLITE_LOCAL_URL
            return self

        drivername = parsed.drivername
        if drivername.startswith("postgres") and "+asyncpg" not in drivername:
            old_drivername = drivername
            parsed = parsed.set(drivername="postgresql+asyncpg")
            logger.info(f"Driver normalized: {old_drivername} -> {parsed.drivername}")
        # Use render_as_string to properly re-encode special characters in password
        self.database_url = parsed.render_as_string(hide_password=False)

        return self

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
