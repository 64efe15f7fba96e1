"""Ledger exceptions shared by services and routers."""
from decimal import Decimal

from clubledger.utils.money import format_money


class LedgerException(RuntimeError):
    """Base exception for ledger errors."""

    code = "LEDGER_ERROR"


class ValidationError(LedgerException):
    """Input rejected before any write."""

    code = "VALIDATION_ERROR"


class InvalidTransactionTypeError(ValidationError):
    code = "INVALID_TYPE"


class InvalidAmountError(ValidationError):
    code = "INVALID_AMOUNT"


class BankAccountRequiredError(ValidationError):
    code = "BANK_ACCOUNT_REQUIRED"


class BankAccountInactiveError(ValidationError):
    code = "BANK_ACCOUNT_INACTIVE"


class InvalidRakebackPercentError(ValidationError):
    code = "INVALID_PERCENT"


class InvalidBankAccountNameError(ValidationError):
    code = "INVALID_NAME"


class InsufficientFundsError(LedgerException):
    """Raised when a channel cannot cover an outgoing amount."""

    code = "INSUFFICIENT_FUNDS"

    def __init__(self, channel_name: str, available: Decimal, currency_symbol: str = "$"):
        self.channel_name = channel_name
        self.available = available
        super().__init__(
            f"Insufficient funds in {channel_name}. Available: {format_money(available, currency_symbol)}"
        )


class NotFoundError(LedgerException):
    """Raised when a referenced player, bank account, or user does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class DuplicateBankAccountError(LedgerException):
    code = "DUPLICATE_NAME"


class LedgerConflictError(LedgerException):
    """Raised when a channel write could not be serialized; safe to retry."""

    code = "CONCURRENCY_CONFLICT"


class InvalidChannelError(ValidationError):
    code = "INVALID_CHANNEL"


class InvalidPaymentMethodError(ValidationError):
    code = "INVALID_PAYMENT_METHOD"


class InvalidDateRangeError(ValidationError):
    code = "INVALID_DATE_RANGE"
