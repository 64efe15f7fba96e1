"""Tests for opening balance upserts."""
from decimal import Decimal
import uuid

import pytest
from sqlalchemy import func, select

from clubledger.models import OpeningBalance
from clubledger.services import OpeningBalanceService
from clubledger.services.channels import CASH, DEPOSITS, Bank
from clubledger.utils.exceptions import InvalidAmountError, InvalidChannelError, NotFoundError, ValidationError


async def _row_count(db_session) -> int:
    result = await db_session.execute(select(func.count()).select_from(OpeningBalance))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_saving_twice_overwrites_instead_of_adding(db_session, admin, staff_factory, today, notifier):
    service = OpeningBalanceService(db_session, notifier=notifier)
    await service.save_balances(today, "08:00", [("CASH", 500), ("DEPOSITS", 20)], admin.user_id)

    other_admin = await staff_factory(name="Night Admin")
    saved = await service.save_balances(today, "09:30", [("CASH", "650.25")], other_admin.user_id)

    assert await _row_count(db_session) == 2
    assert len(saved) == 1
    assert saved[0].amount == Decimal("650.25")
    assert saved[0].entry_time == "09:30"
    assert saved[0].set_by_user_id == other_admin.user_id
    assert await service.get_amount(today, CASH) == Decimal("650.25")
    assert await service.get_amount(today, DEPOSITS) == Decimal("20.00")
    assert notifier.version == 2


@pytest.mark.asyncio
async def test_missing_opening_balance_reads_as_zero(db_session, today):
    assert await OpeningBalanceService(db_session).get_amount(today, CASH) == Decimal("0.00")


@pytest.mark.asyncio
async def test_bank_channel_opening_balance(db_session, admin, bank_account_factory, today):
    account = await bank_account_factory()
    service = OpeningBalanceService(db_session)

    await service.save_balances(today, "08:00", [(str(account.bank_account_id), 75)], admin.user_id)

    assert await service.amounts_for_date(today) == {str(account.bank_account_id): Decimal("75.00")}
    assert await service.get_amount(today, Bank(account.bank_account_id)) == Decimal("75.00")


@pytest.mark.asyncio
async def test_later_duplicate_in_one_request_wins(db_session, admin, today):
    service = OpeningBalanceService(db_session)

    await service.save_balances(today, "08:00", [("CASH", 1), ("cash", 2)], admin.user_id)

    assert await service.get_amount(today, CASH) == Decimal("2.00")
    assert await _row_count(db_session) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "balances, entry_time, error",
    [
        ([("CASH", -1)], "08:00", InvalidAmountError),
        ([("CASH", "abc")], "08:00", InvalidAmountError),
        ([("CASH", True)], "08:00", InvalidAmountError),
        ([("CASH", "100.001")], "08:00", InvalidAmountError),
        ([("CASH", "1e10")], "08:00", InvalidAmountError),
        ([("VAULT", 10)], "08:00", InvalidChannelError),
        ([], "08:00", ValidationError),
        ([("CASH", 10)], "  ", ValidationError),
    ],
)
async def test_invalid_balances_are_rejected(db_session, admin, today, balances, entry_time, error):
    with pytest.raises(error):
        await OpeningBalanceService(db_session).save_balances(today, entry_time, balances, admin.user_id)

    assert await _row_count(db_session) == 0


@pytest.mark.asyncio
async def test_unknown_bank_account_is_rejected(db_session, admin, today):
    with pytest.raises(NotFoundError):
        await OpeningBalanceService(db_session).save_balances(
            today, "08:00", [(str(uuid.uuid4()), 10)], admin.user_id
        )
