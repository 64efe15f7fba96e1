"""Opening balances API router."""
from datetime import date
from typing import Optional
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clubledger.database import get_db
from clubledger.dependencies import get_change_notifier, require_admin, require_cashier
from clubledger.models.staff_user import StaffUser
from clubledger.routers.errors import to_http_exception
from clubledger.schemas.opening_balance import OpeningBalanceResponse, SaveOpeningBalancesRequest
from clubledger.services import ChangeNotifier, OpeningBalanceService
from clubledger.utils.datetime_helpers import utc_today
from clubledger.utils.exceptions import LedgerException

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[OpeningBalanceResponse])
async def get_opening_balances(
    date: Optional[date] = None,
    user: StaffUser = Depends(require_cashier),
    db: AsyncSession = Depends(get_db),
):
    balances = await OpeningBalanceService(db).get_for_date(date or utc_today())
    return [OpeningBalanceResponse.from_opening_balance(b) for b in balances]


@router.put("", response_model=list[OpeningBalanceResponse])
async def save_opening_balances(
    request: SaveOpeningBalancesRequest,
    user: StaffUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    """Set the day's opening balances; saving a channel again overwrites it."""
    service = OpeningBalanceService(db, notifier=notifier)
    try:
        balances = await service.save_balances(
            day=request.date,
            entry_time=request.time,
            balances=[(entry.channel, entry.amount) for entry in request.balances],
            set_by_user_id=user.user_id,
        )
    except LedgerException as e:
        raise to_http_exception(e)

    return [OpeningBalanceResponse.from_opening_balance(b) for b in balances]
