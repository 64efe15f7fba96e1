"""Transaction schemas."""
from pydantic import BaseModel, Field
from typing import Any, Optional
from uuid import UUID
from clubledger.models.transaction import Transaction
from clubledger.schemas.base import BaseSchema, Money, UTCDateTime

# Amounts pass through untouched (no bool to 1 coercion) and the ledger
# rejects bad values with INVALID_AMOUNT rather than a 422.
AmountInput = Any


class CreateTransactionRequest(BaseModel):
    """Record a ledger transaction."""
    player_id: UUID
    type: str
    amount: AmountInput
    notes: Optional[str] = Field(default=None, max_length=1000)
    payment_method: Optional[str] = None
    bank_account_id: Optional[UUID] = None


class TransactionResponse(BaseSchema):
    """Transaction enriched with display names."""
    transaction_id: UUID
    player_id: UUID
    player_name: Optional[str]
    type: str
    amount: Money
    payment_method: Optional[str]
    bank_account_id: Optional[UUID]
    bank_account_name: Optional[str]
    channel: Optional[str]
    notes: Optional[str]
    recorded_by_user_id: UUID
    recorded_by_name: Optional[str]
    created_at: UTCDateTime

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionResponse":
        return cls(
            transaction_id=transaction.transaction_id,
            player_id=transaction.player_id,
            player_name=transaction.player.full_name if transaction.player else None,
            type=transaction.type,
            amount=transaction.amount,
            payment_method=transaction.payment_method,
            bank_account_id=transaction.bank_account_id,
            bank_account_name=transaction.bank_account.name if transaction.bank_account else None,
            channel=transaction.channel,
            notes=transaction.notes,
            recorded_by_user_id=transaction.recorded_by_user_id,
            recorded_by_name=transaction.recorded_by.name if transaction.recorded_by else None,
            created_at=transaction.created_at,
        )
