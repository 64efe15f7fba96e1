"""Tests for the daily reconciliation report."""
from datetime import timedelta
from decimal import Decimal
import uuid

import pytest

from clubledger.services import RakeService, ReportService, SolvencyService, TipService, TransactionService
from clubledger.services.channels import CASH, DEPOSITS, Bank
from clubledger.utils.datetime_helpers import utc_today
from clubledger.utils.lock_client import LockClient


@pytest.fixture
def transactions(db_session, fixed_clock):
    return TransactionService(db_session, locks=LockClient(), clock=fixed_clock)


@pytest.mark.asyncio
async def test_empty_day_still_lists_cash_and_deposits(db_session, today):
    report = await ReportService(db_session).build_daily_report(today)

    assert [c.channel for c in report.channels] == [CASH.key, DEPOSITS.key]
    assert all(c.balance == Decimal("0.00") for c in report.channels)
    assert report.summary.transaction_count == 0
    assert report.transactions == []


@pytest.mark.asyncio
async def test_report_balances_match_solvency_guard(
    db_session, transactions, player_factory, cashier, open_day, bank_account_factory, today
):
    bank = await bank_account_factory("Zenith")
    await open_day({"CASH": 500, "DEPOSITS": 100, str(bank.bank_account_id): 40})
    player = await player_factory()

    await transactions.record(player.player_id, "BUY_IN", 200, cashier.user_id)
    await transactions.record(player.player_id, "CASH_OUT", 650, cashier.user_id)
    await transactions.record(
        player.player_id, "BUY_IN", 60, cashier.user_id,
        payment_method="BANK", bank_account_id=bank.bank_account_id,
    )
    await transactions.record(player.player_id, "DEPOSIT", 25, cashier.user_id)
    await transactions.record(player.player_id, "WITHDRAWAL", 90, cashier.user_id)
    await transactions.record(player.player_id, "RAKEBACK_PAYOUT", 5, cashier.user_id)

    report = await ReportService(db_session).build_daily_report(today)
    guard = SolvencyService(db_session)

    by_key = {c.channel: c for c in report.channels}
    for channel in (CASH, DEPOSITS, Bank(bank.bank_account_id)):
        position = await guard.channel_position(channel, today)
        assert by_key[channel.key].balance == position.available

    assert by_key[CASH.key].balance == Decimal("50.00")
    assert by_key[DEPOSITS.key].balance == Decimal("35.00")
    bank_row = by_key[str(bank.bank_account_id)]
    assert (bank_row.name, bank_row.kind, bank_row.opening, bank_row.inflow, bank_row.balance) == (
        "Zenith", "bank", Decimal("40.00"), Decimal("60.00"), Decimal("100.00"),
    )

    summary = report.summary
    assert summary.transaction_count == 6
    assert summary.total_buy_ins == Decimal("260.00")
    assert summary.total_buy_ins_cash == Decimal("200.00")
    assert summary.total_buy_ins_bank == Decimal("60.00")
    assert summary.total_cash_outs == Decimal("650.00")
    assert summary.total_deposits == Decimal("25.00")
    assert summary.total_withdrawals == Decimal("90.00")
    assert summary.total_rakeback_payouts == Decimal("5.00")


@pytest.mark.asyncio
async def test_channels_are_ordered_cash_banks_deposits(
    db_session, transactions, player_factory, cashier, open_day, bank_account_factory, today
):
    zulu = await bank_account_factory("Zulu")
    alpha = await bank_account_factory("Alpha")
    await bank_account_factory("Idle")  # no flows and no opening
    await open_day({str(zulu.bank_account_id): 10})
    player = await player_factory()
    await transactions.record(
        player.player_id, "BUY_IN", 5, cashier.user_id,
        payment_method="BANK", bank_account_id=alpha.bank_account_id,
    )

    report = await ReportService(db_session).build_daily_report(today)

    assert [c.name for c in report.channels] == ["Cash", "Alpha", "Zulu", "Deposits"]


@pytest.mark.asyncio
async def test_deactivated_bank_with_flows_still_reported(
    db_session, transactions, player_factory, cashier, bank_account_factory, today
):
    bank = await bank_account_factory("Closing Soon")
    player = await player_factory()
    await transactions.record(
        player.player_id, "BUY_IN", 15, cashier.user_id,
        payment_method="BANK", bank_account_id=bank.bank_account_id,
    )
    bank.active = False
    await db_session.commit()

    report = await ReportService(db_session).build_daily_report(today)

    assert "Closing Soon" in [c.name for c in report.channels]


@pytest.mark.asyncio
async def test_transactions_newest_first_with_names(
    db_session, player_factory, cashier, fixed_clock, today
):
    player = await player_factory("Dara", "Ng")
    ticks = iter([fixed_clock(), fixed_clock() + timedelta(minutes=5)])
    service = TransactionService(db_session, locks=LockClient(), clock=lambda: next(ticks))
    first = await service.record(player.player_id, "BUY_IN", 10, cashier.user_id)
    second = await service.record(player.player_id, "DEPOSIT", 10, cashier.user_id)

    report = await ReportService(db_session).build_daily_report(today)

    assert [t.transaction_id for t in report.transactions] == [second.transaction_id, first.transaction_id]
    assert report.transactions[0].player.full_name == "Dara Ng"
    assert report.transactions[0].recorded_by.name == cashier.name


@pytest.mark.asyncio
async def test_summary_includes_rake_and_tips(db_session, cashier):
    await RakeService(db_session).record_rake(uuid.uuid4(), 100, 5, 2)
    await TipService(db_session).collect(uuid.uuid4(), 12, cashier.user_id)

    report = await ReportService(db_session).build_daily_report(utc_today())

    assert report.summary.total_rake == Decimal("5.00")
    assert report.summary.total_tips_collected == Decimal("12.00")
