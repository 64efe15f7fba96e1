"""Opening balance schemas."""
import datetime as dt
from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from clubledger.models.opening_balance import OpeningBalance
from clubledger.schemas.base import BaseSchema, Money, UTCDateTime
from clubledger.schemas.transaction import AmountInput


class OpeningBalanceEntry(BaseModel):
    channel: str  # CASH, DEPOSITS or a bank account id
    amount: AmountInput


class SaveOpeningBalancesRequest(BaseModel):
    """Opening balances for one day, upserted per channel."""
    date: dt.date
    time: str = Field(min_length=1, max_length=8)
    balances: list[OpeningBalanceEntry] = Field(min_length=1)


class OpeningBalanceResponse(BaseSchema):
    opening_balance_id: UUID
    date: dt.date
    channel: str
    amount: Money
    entry_time: str
    set_by_user_id: UUID
    set_by_name: Optional[str]
    updated_at: UTCDateTime

    @classmethod
    def from_opening_balance(cls, balance: OpeningBalance) -> "OpeningBalanceResponse":
        return cls(
            opening_balance_id=balance.opening_balance_id,
            date=balance.date,
            channel=balance.channel,
            amount=balance.amount,
            entry_time=balance.entry_time,
            set_by_user_id=balance.set_by_user_id,
            set_by_name=balance.set_by.name if balance.set_by else None,
            updated_at=balance.updated_at,
        )
