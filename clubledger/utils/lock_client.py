"""Lock client abstraction - Redis or in-memory fallback."""
import asyncio
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
import logging

logger = logging.getLogger(__name__)


class LockAcquisitionError(RuntimeError):
    """Raised when a named lock cannot be obtained in time."""


class LockClient:
    """Abstraction for named locks - uses Redis if available, else in-memory."""

    def __init__(self, redis_url: Optional[str] = None):
        self.backend = "memory"
        # asyncio.Lock binds to the loop that first waits on it, so keep one set per loop.
        self._memory_locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, dict[str, asyncio.Lock]]" = (
            weakref.WeakKeyDictionary()
        )

        if redis_url:
            try:
                import redis.asyncio as redis_asyncio
                self.redis = redis_asyncio.from_url(redis_url, decode_responses=True)
                self.backend = "redis"
                logger.info("Using Redis for locks")
            except Exception as e:
                logger.warning(f"Redis not available, using in-memory locks: {e}")
        else:
            logger.info("Using in-memory locks (Redis URL not provided)")

    def _memory_lock(self, name: str) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        locks = self._memory_locks.get(loop)
        if locks is None:
            locks = {}
            self._memory_locks[loop] = locks
        lock = locks.get(name)
        if lock is None:
            lock = asyncio.Lock()
            locks[name] = lock
        return lock

    @asynccontextmanager
    async def lock(self, name: str, timeout: float = 10) -> AsyncIterator[None]:
        """Hold the named lock for the duration of the block.

        Args:
            name: Lock name shared by every writer that must be serialized
            timeout: Seconds to wait for the lock; with Redis this is also the lock TTL

        Raises:
            LockAcquisitionError: If the lock is not obtained within ``timeout``
        """
        if self.backend == "redis":
            redis_lock = self.redis.lock(name, timeout=timeout, blocking_timeout=timeout)
            acquired = await redis_lock.acquire()
            if not acquired:
                raise LockAcquisitionError(f"Timed out waiting for lock {name}")
            try:
                yield
            finally:
                try:
                    await redis_lock.release()
                except Exception as e:
                    # Lock expired while held; the TTL already released it.
                    logger.warning(f"Failed to release Redis lock {name}: {e}")
        else:
            memory_lock = self._memory_lock(name)
            try:
                await asyncio.wait_for(memory_lock.acquire(), timeout=timeout)
            except asyncio.TimeoutError as exc:
                raise LockAcquisitionError(f"Timed out waiting for lock {name}") from exc
            try:
                yield
            finally:
                memory_lock.release()
