"""Transaction ledger: validated, append-only writes and filtered reads."""
from datetime import date, datetime
from decimal import InvalidOperation
from typing import Callable, Optional
from uuid import UUID
import logging
import uuid

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from clubledger.config import get_settings
from clubledger.models.bank_account import BankAccount
from clubledger.models.base import PaymentMethod, TransactionType
from clubledger.models.player import Player
from clubledger.models.staff_user import StaffUser
from clubledger.models.transaction import Transaction
from clubledger.services.change_notifier import ChangeNotifier
from clubledger.services.channels import Channel, requires_solvency_check, resolve_channel
from clubledger.services.solvency_service import SolvencyService
from clubledger.utils import lock_client as default_lock_client
from clubledger.utils.datetime_helpers import day_bounds, utc_now
from clubledger.utils.exceptions import (
    BankAccountInactiveError,
    BankAccountRequiredError,
    InvalidAmountError,
    InvalidDateRangeError,
    InvalidPaymentMethodError,
    InvalidTransactionTypeError,
    LedgerConflictError,
    NotFoundError,
)
from clubledger.utils.lock_client import LockAcquisitionError, LockClient
from clubledger.utils.money import ZERO, parse_amount

logger = logging.getLogger(__name__)

CHANNEL_LOCK_PREFIX = "ledger_channel"


def parse_transaction_type(value) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError as exc:
        raise InvalidTransactionTypeError(f"Invalid transaction type: {value!r}") from exc


class TransactionService:
    """Service for recording and listing ledger transactions."""

    def __init__(
        self,
        db: AsyncSession,
        notifier: Optional[ChangeNotifier] = None,
        locks: Optional[LockClient] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.notifier = notifier
        self.locks = locks or default_lock_client
        self.clock = clock
        self.settings = get_settings()
        self.solvency = SolvencyService(db)

    async def record(
        self,
        player_id: UUID,
        transaction_type: TransactionType | str,
        amount,
        recorded_by_user_id: UUID,
        notes: str | None = None,
        payment_method: PaymentMethod | str | None = None,
        bank_account_id: UUID | None = None,
    ) -> Transaction:
        """
        Validate and append a transaction.

        Cash-outs and withdrawals are solvency-checked and inserted while
        holding the channel's write lock, so two concurrent requests can never
        both spend the same balance.

        Args:
            player_id: Player the money belongs to
            transaction_type: One of the five ledger types
            amount: Positive amount in currency units
            recorded_by_user_id: Staff member recording the transaction
            notes: Optional free text
            payment_method: CASH or BANK (buy-ins and cash-outs only)
            bank_account_id: Required when payment_method is BANK

        Returns:
            The stored transaction with player, staff and bank account loaded

        Raises:
            InvalidTransactionTypeError, InvalidAmountError,
            BankAccountRequiredError, BankAccountInactiveError,
            InvalidPaymentMethodError: Input rejected, nothing written
            NotFoundError: Unknown player, staff user or bank account
            InsufficientFundsError: Channel cannot cover the amount
            LedgerConflictError: Channel lock not obtained in time; retry
        """
        transaction_type = parse_transaction_type(transaction_type)

        try:
            amount = parse_amount(amount)
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise InvalidAmountError("Amount must be a positive number with at most two decimal places") from exc
        if amount <= ZERO:
            raise InvalidAmountError("Amount must be positive")

        # Payment method only applies to table money (buy-ins and cash-outs)
        if transaction_type in (TransactionType.BUY_IN, TransactionType.CASH_OUT):
            try:
                method = PaymentMethod(payment_method) if payment_method else PaymentMethod.CASH
            except ValueError as exc:
                raise InvalidPaymentMethodError(f"Invalid payment method: {payment_method!r}") from exc
            if method == PaymentMethod.BANK and bank_account_id is None:
                raise BankAccountRequiredError("Bank account is required for bank payments")
            if method == PaymentMethod.CASH:
                bank_account_id = None
        else:
            method = None
            bank_account_id = None

        await self._ensure_player(player_id)
        await self._ensure_staff_user(recorded_by_user_id)
        if bank_account_id is not None:
            await self._ensure_active_bank_account(bank_account_id)

        channel = resolve_channel(transaction_type, method, bank_account_id)

        async def _record_impl() -> Transaction:
            created_at = self.clock()
            if requires_solvency_check(transaction_type):
                await self._serialize_channel_in_db(channel)
                await self.solvency.authorize(channel, amount, created_at.date())

            transaction = Transaction(
                transaction_id=uuid.uuid4(),
                player_id=player_id,
                type=transaction_type.value,
                amount=amount,
                payment_method=method.value if method else None,
                bank_account_id=bank_account_id,
                channel=channel.key if channel else None,
                notes=(notes or "").strip() or None,
                recorded_by_user_id=recorded_by_user_id,
                created_at=created_at,
            )
            self.db.add(transaction)
            await self.db.commit()
            return transaction

        try:
            if requires_solvency_check(transaction_type):
                lock_name = f"{CHANNEL_LOCK_PREFIX}:{channel.key}"
                async with self.locks.lock(lock_name, timeout=self.settings.ledger_lock_timeout_seconds):
                    transaction = await _record_impl()
            else:
                transaction = await _record_impl()
        except LockAcquisitionError as exc:
            await self.db.rollback()
            logger.warning(f"Ledger write conflict on channel {channel.key}: {exc}")
            raise LedgerConflictError(
                f"Channel {channel.key} is busy, please retry the transaction"
            ) from exc
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            f"Transaction recorded: id={transaction.transaction_id}, player={player_id}, "
            f"type={transaction_type.value}, amount={amount}, "
            f"channel={transaction.channel}, by={recorded_by_user_id}"
        )

        if self.notifier:
            self.notifier.bump(f"transaction:{transaction_type.value}")

        return await self.get_transaction(transaction.transaction_id)

    async def get_transaction(self, transaction_id: UUID) -> Transaction:
        result = await self.db.execute(
            self._detailed_select()
            .where(Transaction.transaction_id == transaction_id)
            .execution_options(populate_existing=True)
        )
        transaction = result.scalar_one_or_none()
        if transaction is None:
            raise NotFoundError("Transaction", transaction_id)
        return transaction

    async def list_transactions(
        self,
        player_id: UUID | None = None,
        transaction_type: TransactionType | str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        limit: int | None = None,
    ) -> list[Transaction]:
        """List transactions newest first; ``date_to`` includes the whole day."""
        if date_from is not None and date_to is not None and date_from > date_to:
            raise InvalidDateRangeError("date_from must not be after date_to")
        if limit is None:
            limit = self.settings.transaction_list_default_limit
        limit = max(1, min(limit, self.settings.transaction_list_max_limit))

        stmt = self._detailed_select()
        if player_id is not None:
            stmt = stmt.where(Transaction.player_id == player_id)
        if transaction_type is not None:
            stmt = stmt.where(Transaction.type == parse_transaction_type(transaction_type).value)
        if date_from is not None:
            stmt = stmt.where(Transaction.created_at >= day_bounds(date_from)[0])
        if date_to is not None:
            stmt = stmt.where(Transaction.created_at < day_bounds(date_to)[1])

        result = await self.db.execute(
            stmt.order_by(Transaction.created_at.desc(), Transaction.transaction_id)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    @staticmethod
    def _detailed_select():
        return select(Transaction).options(
            selectinload(Transaction.player),
            selectinload(Transaction.recorded_by),
            selectinload(Transaction.bank_account),
        )

    async def _serialize_channel_in_db(self, channel: Channel) -> None:
        """Take a transaction-scoped advisory lock on PostgreSQL.

        Covers writers in other processes when no shared Redis lock is
        configured. Released automatically at commit or rollback.
        """
        if self.db.get_bind().dialect.name != "postgresql":
            return
        await self.db.execute(
            text("SELECT pg_advisory_xact_lock(hashtext(:lock_key))"),
            {"lock_key": f"{CHANNEL_LOCK_PREFIX}:{channel.key}"},
        )

    async def _ensure_player(self, player_id: UUID) -> Player:
        player = await self.db.get(Player, player_id)
        if player is None:
            raise NotFoundError("Player", player_id)
        return player

    async def _ensure_staff_user(self, user_id: UUID) -> StaffUser:
        user = await self.db.get(StaffUser, user_id)
        if user is None:
            raise NotFoundError("Staff user", user_id)
        return user

    async def _ensure_active_bank_account(self, bank_account_id: UUID) -> BankAccount:
        account = await self.db.get(BankAccount, bank_account_id)
        if account is None:
            raise NotFoundError("Bank account", bank_account_id)
        if not account.active:
            raise BankAccountInactiveError(f"Bank account {account.name} is inactive")
        return account
