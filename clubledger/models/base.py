"""Base utilities for SQLAlchemy models."""
from enum import Enum
from sqlalchemy import Column, Numeric, Uuid


class TransactionType(str, Enum):
    """Ledger transaction kinds."""
    BUY_IN = "BUY_IN"
    CASH_OUT = "CASH_OUT"
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    RAKEBACK_PAYOUT = "RAKEBACK_PAYOUT"


class PaymentMethod(str, Enum):
    """How a buy-in or cash-out was settled."""
    CASH = "CASH"
    BANK = "BANK"


class StaffRole(str, Enum):
    """Floor staff roles used for endpoint gating."""
    ADMIN = "ADMIN"
    CASHIER = "CASHIER"
    PITBOSS = "PITBOSS"
    DEALER = "DEALER"


def get_uuid_column(*args, **kwargs):
    """Get a UUID column that is native on PostgreSQL and CHAR(32) elsewhere.

    Example:
        player_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
        foreign_id = get_uuid_column(ForeignKey("table.id"), nullable=True)
    """
    return Column(Uuid(as_uuid=True), *args, **kwargs)


def money_column(*args, **kwargs):
    """Get a currency column stored with two decimal places."""
    return Column(Numeric(12, 2, asdecimal=True), *args, **kwargs)
