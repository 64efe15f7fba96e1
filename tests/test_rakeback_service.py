"""Tests for rakeback arithmetic."""
from decimal import Decimal
import uuid

import pytest

from clubledger.services import PlayerService, RakeService, RakebackService, TransactionService
from clubledger.services.rakeback_service import compute_rakeback
from clubledger.utils.exceptions import InvalidRakebackPercentError, NotFoundError
from clubledger.utils.lock_client import LockClient


@pytest.mark.asyncio
async def test_rakeback_earned_and_balance(db_session, player_factory, cashier):
    player = await player_factory("Lee", rakeback_percent=Decimal("20"))
    rake = RakeService(db_session)
    session_id = uuid.uuid4()
    await rake.record_rake(session_id, 200, "12.50", player_id=player.player_id)
    await rake.record_rake(session_id, 300, "37.50", player_id=player.player_id)
    await rake.record_rake(session_id, 100, 99)  # unattributed
    await TransactionService(db_session, locks=LockClient()).record(
        player.player_id, "RAKEBACK_PAYOUT", 4, cashier.user_id
    )

    entry = await RakebackService(db_session).rakeback_for(player.player_id)

    assert entry.total_rake_contributed == Decimal("50.00")
    assert entry.rakeback_percent == Decimal("20")
    assert entry.rakeback_earned == Decimal("10.00")
    assert entry.total_paid_out == Decimal("4.00")
    assert entry.rakeback_balance == Decimal("6.00")


@pytest.mark.asyncio
async def test_lowering_percent_can_make_balance_negative(db_session, player_factory, cashier):
    player = await player_factory(rakeback_percent=50)
    await RakeService(db_session).record_rake(uuid.uuid4(), 100, 20, player_id=player.player_id)
    await TransactionService(db_session, locks=LockClient()).record(
        player.player_id, "RAKEBACK_PAYOUT", 10, cashier.user_id
    )

    await PlayerService(db_session).set_rakeback_percent(player.player_id, 10)
    entry = await RakebackService(db_session).rakeback_for(player.player_id)

    assert entry.rakeback_earned == Decimal("2.00")
    assert entry.rakeback_balance == Decimal("-8.00")


@pytest.mark.asyncio
async def test_rakeback_for_all_lists_players_with_percent_by_first_name(db_session, player_factory):
    await player_factory("Zed", rakeback_percent=5)
    await player_factory("Amy", rakeback_percent=10)
    await player_factory("Bob", rakeback_percent=0)

    entries = await RakebackService(db_session).rakeback_for_all()

    assert [e.player.first_name for e in entries] == ["Amy", "Zed"]
    assert all(e.total_rake_contributed == Decimal("0.00") for e in entries)


@pytest.mark.asyncio
async def test_unknown_player_is_not_found(db_session):
    with pytest.raises(NotFoundError):
        await RakebackService(db_session).rakeback_for(uuid.uuid4())


def test_earned_rounds_half_up_to_cents():
    class _Player:
        rakeback_percent = Decimal("12.5")

    entry = compute_rakeback(_Player(), Decimal("0.60"), Decimal("0"))

    assert entry.rakeback_earned == Decimal("0.08")


@pytest.mark.asyncio
@pytest.mark.parametrize("percent", [-1, "100.01", "abc", True])
async def test_rakeback_percent_must_be_between_0_and_100(db_session, player_factory, percent):
    player = await player_factory()

    with pytest.raises(InvalidRakebackPercentError):
        await PlayerService(db_session).set_rakeback_percent(player.player_id, percent)


@pytest.mark.asyncio
async def test_set_rakeback_percent_on_unknown_player(db_session):
    with pytest.raises(NotFoundError):
        await PlayerService(db_session).set_rakeback_percent(uuid.uuid4(), 10)


@pytest.mark.asyncio
async def test_rakeback_percent_is_kept_to_two_places(db_session, player_factory):
    player = await player_factory("Noor", "Aziz")

    updated = await PlayerService(db_session).set_rakeback_percent(player.player_id, "12.346")

    assert updated.rakeback_percent == Decimal("12.35")
