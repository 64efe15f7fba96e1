"""Tests for the data version notifier."""
import pytest

from clubledger.services.change_notifier import ChangeNotifier


def test_version_increases_on_every_bump():
    notifier = ChangeNotifier()

    assert notifier.version == 0
    assert notifier.bump("transaction") == 1
    assert notifier.bump("rake") == 2
    assert notifier.version == 2


@pytest.mark.asyncio
async def test_subscribers_receive_new_versions():
    notifier = ChangeNotifier()
    queue = notifier.subscribe()

    notifier.bump()
    notifier.bump()

    assert await queue.get() == 1
    assert await queue.get() == 2


@pytest.mark.asyncio
async def test_slow_subscriber_keeps_latest_versions():
    notifier = ChangeNotifier(subscriber_queue_size=2)
    queue = notifier.subscribe()

    for _ in range(5):
        notifier.bump()

    assert queue.qsize() == 2
    assert [queue.get_nowait(), queue.get_nowait()] == [4, 5]


def test_unsubscribe_stops_delivery():
    notifier = ChangeNotifier()
    queue = notifier.subscribe()
    assert notifier.subscriber_count == 1

    notifier.unsubscribe(queue)
    notifier.bump()

    assert notifier.subscriber_count == 0
    assert queue.empty()
