"""Rake record schemas."""
from pydantic import BaseModel
from typing import Optional
from uuid import UUID
from clubledger.schemas.base import BaseSchema, Money, UTCDateTime
from clubledger.schemas.transaction import AmountInput


class CreateRakeRecordRequest(BaseModel):
    table_session_id: UUID
    pot_amount: AmountInput
    rake_amount: AmountInput
    tip_amount: Optional[AmountInput] = None
    player_id: Optional[UUID] = None


class RakeRecordResponse(BaseSchema):
    rake_record_id: UUID
    table_session_id: UUID
    pot_amount: Money
    rake_amount: Money
    tip_amount: Money
    player_id: Optional[UUID]
    created_at: UTCDateTime


class SessionRakeResponse(BaseSchema):
    records: list[RakeRecordResponse]
    total_rake: Money
    total_pots: Money
