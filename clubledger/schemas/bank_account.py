"""Bank account schemas."""
from pydantic import BaseModel
from uuid import UUID
from clubledger.schemas.base import BaseSchema, UTCDateTime


class BankAccountNameRequest(BaseModel):
    name: str


class BankAccountResponse(BaseSchema):
    bank_account_id: UUID
    name: str
    active: bool
    created_at: UTCDateTime
