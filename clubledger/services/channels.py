"""Channel resolution for balance bucketing.

A channel is an independently balanced money pool: cash on hand, one bank
account, or the player deposits pool. Transactions map onto channels through
``resolve_channel``, and every read or write path that sums balances must go
through it (and ``flow_direction``) so solvency checks and daily reports
classify money identically.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
from uuid import UUID

from clubledger.models.base import PaymentMethod, TransactionType

CASH_KEY = "CASH"
DEPOSITS_KEY = "DEPOSITS"


@dataclass(frozen=True)
class Cash:
    """Physical cash on hand."""

    @property
    def key(self) -> str:
        return CASH_KEY


@dataclass(frozen=True)
class Deposits:
    """Money players leave on account with the club."""

    @property
    def key(self) -> str:
        return DEPOSITS_KEY


@dataclass(frozen=True)
class Bank:
    """A specific bank account."""

    bank_account_id: UUID

    @property
    def key(self) -> str:
        return str(self.bank_account_id)


Channel = Union[Cash, Deposits, Bank]

CASH = Cash()
DEPOSITS = Deposits()


class FlowDirection(str, Enum):
    INFLOW = "in"
    OUTFLOW = "out"


def parse_channel(key: str) -> Channel:
    """Turn a stored channel key back into a channel.

    Raises:
        ValueError: If the key is neither a literal tag nor a UUID
    """
    normalized = (key or "").strip()
    if normalized.upper() == CASH_KEY:
        return CASH
    if normalized.upper() == DEPOSITS_KEY:
        return DEPOSITS
    try:
        return Bank(UUID(normalized))
    except ValueError as exc:
        raise ValueError(f"Unknown channel: {key!r}") from exc


def resolve_channel(
    transaction_type: TransactionType | str,
    payment_method: PaymentMethod | str | None = None,
    bank_account_id: UUID | None = None,
) -> Optional[Channel]:
    """Map a transaction to the channel whose balance it moves.

    Returns ``None`` for rakeback payouts, which are paid from an untracked
    pool and never touch a channel balance.

    Raises:
        ValueError: If the transaction type is not a ledger type
    """
    transaction_type = TransactionType(transaction_type)

    if transaction_type in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL):
        return DEPOSITS

    if transaction_type in (TransactionType.BUY_IN, TransactionType.CASH_OUT):
        method = PaymentMethod(payment_method) if payment_method else PaymentMethod.CASH
        if method == PaymentMethod.BANK and bank_account_id is not None:
            return Bank(bank_account_id)
        return CASH

    return None


def flow_direction(transaction_type: TransactionType | str) -> Optional[FlowDirection]:
    """Whether a transaction type adds to or draws from its channel."""
    transaction_type = TransactionType(transaction_type)
    if transaction_type in (TransactionType.BUY_IN, TransactionType.DEPOSIT):
        return FlowDirection.INFLOW
    if transaction_type in (TransactionType.CASH_OUT, TransactionType.WITHDRAWAL):
        return FlowDirection.OUTFLOW
    return None


INFLOW_TYPES = tuple(t.value for t in TransactionType if flow_direction(t) == FlowDirection.INFLOW)
OUTFLOW_TYPES = tuple(t.value for t in TransactionType if flow_direction(t) == FlowDirection.OUTFLOW)


def requires_solvency_check(transaction_type: TransactionType | str) -> bool:
    return flow_direction(transaction_type) == FlowDirection.OUTFLOW


def channel_sort_key(channel: Channel, name: str = "") -> tuple:
    """Report ordering: cash, then bank accounts by name, then deposits."""
    if isinstance(channel, Cash):
        return (0, "", "")
    if isinstance(channel, Bank):
        return (1, name.lower(), channel.key)
    return (2, "", "")


def default_channel_name(channel: Channel) -> str:
    if isinstance(channel, Cash):
        return "Cash"
    if isinstance(channel, Deposits):
        return "Deposits"
    return f"Bank {channel.bank_account_id}"


def channel_kind(channel: Channel) -> str:
    if isinstance(channel, Cash):
        return "cash"
    if isinstance(channel, Deposits):
        return "deposit"
    return "bank"
