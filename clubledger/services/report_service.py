"""Daily reconciliation report builder."""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import UUID
import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from clubledger.models.bank_account import BankAccount
from clubledger.models.base import PaymentMethod, TransactionType
from clubledger.models.rake_record import RakeRecord
from clubledger.models.tip_collection import TipCollection
from clubledger.models.transaction import Transaction
from clubledger.services.channels import (
    CASH,
    DEPOSITS,
    Bank,
    Channel,
    channel_kind,
    channel_sort_key,
    default_channel_name,
    parse_channel,
)
from clubledger.services.opening_balance_service import OpeningBalanceService
from clubledger.services.solvency_service import ChannelFlows, ChannelPosition, load_day_flows
from clubledger.utils.datetime_helpers import day_bounds
from clubledger.utils.money import ZERO, to_money

logger = logging.getLogger(__name__)


@dataclass
class DailySummary:
    total_buy_ins: Decimal = ZERO
    total_buy_ins_cash: Decimal = ZERO
    total_buy_ins_bank: Decimal = ZERO
    total_cash_outs: Decimal = ZERO
    total_deposits: Decimal = ZERO
    total_withdrawals: Decimal = ZERO
    total_rakeback_payouts: Decimal = ZERO
    transaction_count: int = 0
    total_rake: Decimal = ZERO
    total_tips_collected: Decimal = ZERO


@dataclass
class ChannelReport:
    channel: str
    name: str
    kind: str
    opening: Decimal
    inflow: Decimal
    outflow: Decimal
    net: Decimal
    balance: Decimal


@dataclass
class DailyReport:
    date: date
    summary: DailySummary
    channels: list[ChannelReport] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)


class ReportService:
    """Aggregate a day's ledger, rake and tips into a reconciliation report."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.opening_balances = OpeningBalanceService(db)

    async def build_daily_report(self, day: date) -> DailyReport:
        start, end = day_bounds(day)

        result = await self.db.execute(
            select(Transaction)
            .options(
                selectinload(Transaction.player),
                selectinload(Transaction.recorded_by),
                selectinload(Transaction.bank_account),
            )
            .where(Transaction.created_at >= start, Transaction.created_at < end)
            .order_by(Transaction.created_at.desc(), Transaction.transaction_id)
            .execution_options(populate_existing=True)
        )
        transactions = list(result.scalars().all())

        summary = self._summarize(transactions)
        summary.total_rake = await self._sum_for_day(RakeRecord.rake_amount, RakeRecord.created_at, day)
        summary.total_tips_collected = await self._sum_for_day(
            TipCollection.amount, TipCollection.created_at, day
        )

        channels = await self._build_channels(day)

        logger.debug(
            f"Daily report built: date={day}, transactions={summary.transaction_count}, "
            f"channels={len(channels)}"
        )
        return DailyReport(date=day, summary=summary, channels=channels, transactions=transactions)

    @staticmethod
    def _summarize(transactions: list[Transaction]) -> DailySummary:
        summary = DailySummary(transaction_count=len(transactions))
        for transaction in transactions:
            amount = to_money(transaction.amount)
            transaction_type = TransactionType(transaction.type)
            if transaction_type == TransactionType.BUY_IN:
                summary.total_buy_ins += amount
                if transaction.payment_method == PaymentMethod.BANK.value:
                    summary.total_buy_ins_bank += amount
                else:
                    summary.total_buy_ins_cash += amount
            elif transaction_type == TransactionType.CASH_OUT:
                summary.total_cash_outs += amount
            elif transaction_type == TransactionType.DEPOSIT:
                summary.total_deposits += amount
            elif transaction_type == TransactionType.WITHDRAWAL:
                summary.total_withdrawals += amount
            elif transaction_type == TransactionType.RAKEBACK_PAYOUT:
                summary.total_rakeback_payouts += amount
        return summary

    async def _sum_for_day(self, amount_column, created_column, day: date) -> Decimal:
        start, end = day_bounds(day)
        result = await self.db.execute(
            select(func.coalesce(func.sum(amount_column), 0)).where(
                created_column >= start, created_column < end
            )
        )
        return to_money(result.scalar_one())

    async def _build_channels(self, day: date) -> list[ChannelReport]:
        flows = await load_day_flows(self.db, day)
        openings = await self.opening_balances.amounts_for_date(day)

        bank_ids_with_flows: set[UUID] = set()
        for key in flows:
            channel = parse_channel(key)
            if isinstance(channel, Bank):
                bank_ids_with_flows.add(channel.bank_account_id)

        # Banks with activity today, plus active banks carrying an opening balance
        bank_conditions = [BankAccount.active.is_(True)]
        if bank_ids_with_flows:
            bank_conditions.append(BankAccount.bank_account_id.in_(bank_ids_with_flows))
        result = await self.db.execute(select(BankAccount).where(or_(*bank_conditions)))
        bank_accounts = list(result.scalars().all())

        channels: list[tuple[Channel, str]] = [(CASH, default_channel_name(CASH))]
        for account in bank_accounts:
            channel = Bank(account.bank_account_id)
            has_flows = account.bank_account_id in bank_ids_with_flows
            has_opening = openings.get(channel.key, ZERO) != ZERO
            if has_flows or (account.active and has_opening):
                channels.append((channel, account.name))
        channels.append((DEPOSITS, default_channel_name(DEPOSITS)))

        channels.sort(key=lambda item: channel_sort_key(item[0], item[1]))

        reports = []
        for channel, name in channels:
            channel_flows = flows.get(channel.key, ChannelFlows())
            position = ChannelPosition(
                channel=channel,
                opening=openings.get(channel.key, ZERO),
                inflow=channel_flows.inflow,
                outflow=channel_flows.outflow,
            )
            reports.append(
                ChannelReport(
                    channel=channel.key,
                    name=name,
                    kind=channel_kind(channel),
                    opening=position.opening,
                    inflow=position.inflow,
                    outflow=position.outflow,
                    net=position.net,
                    balance=position.available,
                )
            )
        return reports
