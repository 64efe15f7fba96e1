"""Tip collection log (dealer tips handed to the cashier)."""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from clubledger.models.staff_user import StaffUser
from clubledger.models.tip_collection import TipCollection
from clubledger.services.change_notifier import ChangeNotifier
from clubledger.utils.datetime_helpers import day_bounds, utc_now
from clubledger.utils.exceptions import InvalidAmountError, NotFoundError
from clubledger.utils.money import ZERO, parse_amount, to_money

logger = logging.getLogger(__name__)


@dataclass
class TableTips:
    table_id: UUID
    table_name: str | None
    total: Decimal = ZERO
    count: int = 0


@dataclass
class DailyTips:
    date: date
    grand_total: Decimal
    by_table: list[TableTips] = field(default_factory=list)
    collections: list[TipCollection] = field(default_factory=list)


class TipService:
    def __init__(self, db: AsyncSession, notifier: Optional[ChangeNotifier] = None):
        self.db = db
        self.notifier = notifier

    async def collect(
        self,
        table_id: UUID,
        amount,
        collected_by_user_id: UUID,
        notes: str | None = None,
        table_name: str | None = None,
    ) -> TipCollection:
        try:
            amount = parse_amount(amount)
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise InvalidAmountError("Amount must be a positive number with at most two decimal places") from exc
        if amount <= ZERO:
            raise InvalidAmountError("Amount must be positive")

        if await self.db.get(StaffUser, collected_by_user_id) is None:
            raise NotFoundError("Staff user", collected_by_user_id)

        collection = TipCollection(
            tip_collection_id=uuid.uuid4(),
            table_id=table_id,
            table_name=(table_name or "").strip() or None,
            amount=amount,
            notes=(notes or "").strip() or None,
            collected_by_user_id=collected_by_user_id,
            created_at=utc_now(),
        )
        self.db.add(collection)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Tips collected: table={table_id}, amount={amount}, by={collected_by_user_id}")
        if self.notifier:
            self.notifier.bump("tips")

        result = await self.db.execute(
            select(TipCollection)
            .options(selectinload(TipCollection.collected_by))
            .where(TipCollection.tip_collection_id == collection.tip_collection_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def daily_summary(self, day: date) -> DailyTips:
        start, end = day_bounds(day)
        result = await self.db.execute(
            select(TipCollection)
            .options(selectinload(TipCollection.collected_by))
            .where(TipCollection.created_at >= start, TipCollection.created_at < end)
            .order_by(TipCollection.created_at.desc(), TipCollection.tip_collection_id)
        )
        collections = list(result.scalars().all())

        by_table: dict[UUID, TableTips] = {}
        for collection in collections:
            entry = by_table.get(collection.table_id)
            if entry is None:
                entry = TableTips(table_id=collection.table_id, table_name=collection.table_name)
                by_table[collection.table_id] = entry
            entry.total += to_money(collection.amount)
            entry.count += 1
            if entry.table_name is None and collection.table_name:
                entry.table_name = collection.table_name

        return DailyTips(
            date=day,
            grand_total=sum((to_money(c.amount) for c in collections), ZERO),
            by_table=list(by_table.values()),
            collections=collections,
        )
