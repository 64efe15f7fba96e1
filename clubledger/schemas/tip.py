"""Tip collection schemas."""
import datetime as dt
from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from clubledger.models.tip_collection import TipCollection
from clubledger.schemas.base import BaseSchema, Money, UTCDateTime
from clubledger.schemas.transaction import AmountInput


class CollectTipsRequest(BaseModel):
    table_id: UUID
    amount: AmountInput
    table_name: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = Field(default=None, max_length=1000)


class TipCollectionResponse(BaseSchema):
    tip_collection_id: UUID
    table_id: UUID
    table_name: Optional[str]
    amount: Money
    notes: Optional[str]
    collected_by_user_id: UUID
    collected_by_name: Optional[str]
    created_at: UTCDateTime

    @classmethod
    def from_collection(cls, collection: TipCollection) -> "TipCollectionResponse":
        return cls(
            tip_collection_id=collection.tip_collection_id,
            table_id=collection.table_id,
            table_name=collection.table_name,
            amount=collection.amount,
            notes=collection.notes,
            collected_by_user_id=collection.collected_by_user_id,
            collected_by_name=collection.collected_by.name if collection.collected_by else None,
            created_at=collection.created_at,
        )


class TableTipsResponse(BaseSchema):
    table_id: UUID
    table_name: Optional[str]
    total: Money
    count: int


class DailyTipsResponse(BaseSchema):
    date: dt.date
    grand_total: Money
    by_table: list[TableTipsResponse]
    collections: list[TipCollectionResponse]
