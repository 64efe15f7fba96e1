"""Player schemas."""
from pydantic import BaseModel
from uuid import UUID
from clubledger.schemas.base import BaseSchema, Money
from clubledger.schemas.transaction import AmountInput


class UpdateRakebackPercentRequest(BaseModel):
    rakeback_percent: AmountInput


class PlayerResponse(BaseSchema):
    player_id: UUID
    first_name: str
    last_name: str
    rakeback_percent: Money
