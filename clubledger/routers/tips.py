"""Tip collections API router."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clubledger.database import get_db
from clubledger.dependencies import get_change_notifier, require_cashier
from clubledger.models.staff_user import StaffUser
from clubledger.routers.errors import to_http_exception
from clubledger.schemas.tip import (
    CollectTipsRequest,
    DailyTipsResponse,
    TableTipsResponse,
    TipCollectionResponse,
)
from clubledger.services import ChangeNotifier, TipService
from clubledger.utils.datetime_helpers import utc_today
from clubledger.utils.exceptions import LedgerException

router = APIRouter()


@router.post("", response_model=TipCollectionResponse, status_code=201)
async def collect_tips(
    request: CollectTipsRequest,
    user: StaffUser = Depends(require_cashier),
    db: AsyncSession = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    try:
        collection = await TipService(db, notifier=notifier).collect(
            table_id=request.table_id,
            amount=request.amount,
            collected_by_user_id=user.user_id,
            notes=request.notes,
            table_name=request.table_name,
        )
    except LedgerException as e:
        raise to_http_exception(e)
    return TipCollectionResponse.from_collection(collection)


@router.get("", response_model=DailyTipsResponse)
async def daily_tips(
    date: Optional[date] = None,
    user: StaffUser = Depends(require_cashier),
    db: AsyncSession = Depends(get_db),
):
    summary = await TipService(db).daily_summary(date or utc_today())
    return DailyTipsResponse(
        date=summary.date,
        grand_total=summary.grand_total,
        by_table=[TableTipsResponse.model_validate(t) for t in summary.by_table],
        collections=[TipCollectionResponse.from_collection(c) for c in summary.collections],
    )
