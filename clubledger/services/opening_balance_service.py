"""Opening balance store: one administrator-declared amount per (day, channel)."""
from datetime import date, datetime, UTC
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional
from uuid import UUID
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from clubledger.models.bank_account import BankAccount
from clubledger.models.opening_balance import OpeningBalance
from clubledger.services.change_notifier import ChangeNotifier
from clubledger.services.channels import Bank, Channel, parse_channel
from clubledger.utils.exceptions import (
    InvalidAmountError,
    InvalidChannelError,
    NotFoundError,
    ValidationError,
)
from clubledger.utils.money import ZERO, parse_amount, to_money

logger = logging.getLogger(__name__)


class OpeningBalanceService:
    """Read and upsert opening balances."""

    def __init__(self, db: AsyncSession, notifier: Optional[ChangeNotifier] = None):
        self.db = db
        self.notifier = notifier

    async def get_amount(self, day: date, channel: Channel) -> Decimal:
        """Opening balance for a channel, or zero when none was entered."""
        result = await self.db.execute(
            select(OpeningBalance.amount).where(
                OpeningBalance.date == day,
                OpeningBalance.channel == channel.key,
            )
        )
        return to_money(result.scalar_one_or_none())

    async def amounts_for_date(self, day: date) -> dict[str, Decimal]:
        """Map of channel key to opening amount for a day."""
        result = await self.db.execute(
            select(OpeningBalance.channel, OpeningBalance.amount).where(OpeningBalance.date == day)
        )
        return {channel: to_money(amount) for channel, amount in result.all()}

    async def get_for_date(self, day: date) -> list[OpeningBalance]:
        result = await self.db.execute(
            select(OpeningBalance)
            .options(selectinload(OpeningBalance.set_by))
            .where(OpeningBalance.date == day)
            .order_by(OpeningBalance.channel)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def save_balances(
        self,
        day: date,
        entry_time: str,
        balances: Iterable[tuple[str, object]],
        set_by_user_id: UUID,
    ) -> list[OpeningBalance]:
        """Upsert opening balances for a day.

        A second save for the same (day, channel) overwrites the amount, entry
        time and author; it never adds a row.

        Args:
            day: Calendar day the balances open
            entry_time: Time of entry as typed by the administrator
            balances: (channel key, amount) pairs
            set_by_user_id: Administrator saving the balances

        Raises:
            ValidationError: If no balances or no entry time are given
            InvalidChannelError: If a channel key is not recognised
            InvalidAmountError: If an amount is not a non-negative number
            NotFoundError: If a bank channel refers to an unknown account
        """
        entry_time = (entry_time or "").strip()
        if not entry_time:
            raise ValidationError("time is required")

        # Later entries for the same channel win, as with repeated saves.
        normalized: dict[str, Decimal] = {}
        for raw_channel, raw_amount in balances:
            try:
                channel = parse_channel(raw_channel)
            except ValueError as exc:
                raise InvalidChannelError(str(exc)) from exc

            try:
                amount = parse_amount(raw_amount)
            except (InvalidOperation, ValueError, TypeError) as exc:
                raise InvalidAmountError(f"Invalid opening amount for {raw_channel}: {raw_amount!r}") from exc
            if amount < ZERO:
                raise InvalidAmountError(f"Opening amount for {raw_channel} cannot be negative")

            if isinstance(channel, Bank):
                await self._ensure_bank_account(channel.bank_account_id)

            normalized[channel.key] = amount

        if not normalized:
            raise ValidationError("balances are required")

        insert = sqlite_insert if self.db.get_bind().dialect.name == "sqlite" else pg_insert
        now = datetime.now(UTC)

        try:
            for channel_key, amount in normalized.items():
                stmt = insert(OpeningBalance).values(
                    opening_balance_id=uuid.uuid4(),
                    date=day,
                    channel=channel_key,
                    amount=amount,
                    entry_time=entry_time,
                    set_by_user_id=set_by_user_id,
                    updated_at=now,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=["date", "channel"],
                    set_={
                        "amount": amount,
                        "entry_time": entry_time,
                        "set_by_user_id": set_by_user_id,
                        "updated_at": now,
                    },
                )
                await self.db.execute(stmt)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            f"Opening balances saved: date={day}, time={entry_time}, "
            f"channels={sorted(normalized)}, by={set_by_user_id}"
        )

        if self.notifier:
            self.notifier.bump("opening_balances")

        result = await self.db.execute(
            select(OpeningBalance)
            .options(selectinload(OpeningBalance.set_by))
            .where(OpeningBalance.date == day, OpeningBalance.channel.in_(list(normalized)))
            .order_by(OpeningBalance.channel)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def _ensure_bank_account(self, bank_account_id: UUID) -> None:
        account = await self.db.get(BankAccount, bank_account_id)
        if account is None:
            raise NotFoundError("Bank account", bank_account_id)
