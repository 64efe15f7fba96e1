"""Solvency guard and per-channel daily flows.

``load_day_flows`` is the single place that sums a day's transactions per
channel. The guard uses it for one channel before admitting a withdrawal and
the report builder uses it for every channel at read time, so both see the
same numbers for the same day.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from clubledger.config import get_settings
from clubledger.models.bank_account import BankAccount
from clubledger.models.transaction import Transaction
from clubledger.services.channels import (
    Bank,
    INFLOW_TYPES,
    OUTFLOW_TYPES,
    Channel,
    default_channel_name,
)
from clubledger.services.opening_balance_service import OpeningBalanceService
from clubledger.utils.datetime_helpers import day_bounds
from clubledger.utils.exceptions import InsufficientFundsError
from clubledger.utils.money import ZERO, to_money

logger = logging.getLogger(__name__)


@dataclass
class ChannelFlows:
    """Money into and out of one channel over one day."""
    inflow: Decimal = field(default_factory=lambda: ZERO)
    outflow: Decimal = field(default_factory=lambda: ZERO)


@dataclass
class ChannelPosition:
    """Opening balance plus the day's flows for a channel."""
    channel: Channel
    opening: Decimal
    inflow: Decimal
    outflow: Decimal

    @property
    def net(self) -> Decimal:
        return self.inflow - self.outflow

    @property
    def available(self) -> Decimal:
        return self.opening + self.net


async def load_day_flows(
    db: AsyncSession,
    day: date,
    channel: Optional[Channel] = None,
) -> dict[str, ChannelFlows]:
    """Sum a day's transactions per channel key.

    Rakeback payouts carry no channel and are skipped. When ``channel`` is
    given only that channel is scanned.
    """
    start, end = day_bounds(day)
    stmt = (
        select(
            Transaction.channel,
            Transaction.type,
            func.coalesce(func.sum(Transaction.amount), 0),
        )
        .where(
            Transaction.created_at >= start,
            Transaction.created_at < end,
            Transaction.channel.is_not(None),
            Transaction.type.in_(INFLOW_TYPES + OUTFLOW_TYPES),
        )
        .group_by(Transaction.channel, Transaction.type)
    )
    if channel is not None:
        stmt = stmt.where(Transaction.channel == channel.key)

    result = await db.execute(stmt)

    flows: dict[str, ChannelFlows] = {}
    for channel_key, transaction_type, total in result.all():
        entry = flows.setdefault(channel_key, ChannelFlows())
        if transaction_type in INFLOW_TYPES:
            entry.inflow += to_money(total)
        else:
            entry.outflow += to_money(total)
    return flows


class SolvencyService:
    """Decide whether a channel can cover an outgoing amount."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()
        self.opening_balances = OpeningBalanceService(db)

    async def channel_position(self, channel: Channel, as_of_date: date) -> ChannelPosition:
        opening = await self.opening_balances.get_amount(as_of_date, channel)
        flows = (await load_day_flows(self.db, as_of_date, channel)).get(channel.key, ChannelFlows())
        return ChannelPosition(
            channel=channel,
            opening=opening,
            inflow=flows.inflow,
            outflow=flows.outflow,
        )

    async def channel_name(self, channel: Channel) -> str:
        if isinstance(channel, Bank):
            account = await self.db.get(BankAccount, channel.bank_account_id)
            if account is not None:
                return account.name
        return default_channel_name(channel)

    async def authorize(
        self,
        channel: Channel,
        amount_requested: Decimal,
        as_of_date: date,
    ) -> ChannelPosition:
        """Check that ``channel`` can pay ``amount_requested`` today.

        This is only race-free when the caller holds the channel's write lock
        until its insert commits.

        Raises:
            InsufficientFundsError: If opening + inflow - outflow < amount_requested
        """
        position = await self.channel_position(channel, as_of_date)
        if position.available < amount_requested:
            channel_name = await self.channel_name(channel)
            logger.info(
                f"Solvency check failed: channel={channel.key}, date={as_of_date}, "
                f"requested={amount_requested}, available={position.available}"
            )
            raise InsufficientFundsError(
                channel_name, position.available, self.settings.currency_symbol
            )
        return position
