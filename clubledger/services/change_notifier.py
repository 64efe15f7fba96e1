"""Change notification for ledger readers.

Clients either poll ``version`` and refetch when it moves, or subscribe for
pushed versions. The counter is only a staleness hint: nothing in the ledger
relies on it for correctness.
"""
from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger(__name__)


class ChangeNotifier:
    """Monotonic data-version counter with push subscribers."""

    def __init__(self, subscriber_queue_size: int = 16) -> None:
        self._version = 0
        self._subscriber_queue_size = subscriber_queue_size
        self._subscribers: set[asyncio.Queue] = set()

    @property
    def version(self) -> int:
        return self._version

    def bump(self, reason: str = "") -> int:
        """Advance the version and push it to every subscriber."""
        self._version += 1
        logger.debug("Data version bumped to %s (%s)", self._version, reason or "unspecified")

        for queue in list(self._subscribers):
            if queue.full():
                # Slow reader: only the newest version matters.
                try:
                    queue.get_nowait()
                except asyncio.QueueEmpty:
                    pass
            queue.put_nowait(self._version)

        return self._version

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._subscriber_queue_size)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
