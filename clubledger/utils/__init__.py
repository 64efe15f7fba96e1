"""Utilities module - lock client and shared helpers."""
from clubledger.config import get_settings
from clubledger.utils.lock_client import LockClient
from clubledger.utils.datetime_helpers import ensure_utc

settings = get_settings()

# Create singleton instance
lock_client = LockClient(settings.redis_url if settings.redis_url else None)

__all__ = ["lock_client", "ensure_utc"]
