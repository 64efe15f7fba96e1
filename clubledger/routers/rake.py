"""Rake records API router."""
from uuid import UUID
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clubledger.database import get_db
from clubledger.dependencies import get_change_notifier, require_floor
from clubledger.models.staff_user import StaffUser
from clubledger.routers.errors import to_http_exception
from clubledger.schemas.rake import CreateRakeRecordRequest, RakeRecordResponse, SessionRakeResponse
from clubledger.services import ChangeNotifier, RakeService
from clubledger.utils.exceptions import LedgerException

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=RakeRecordResponse, status_code=201)
async def create_rake_record(
    request: CreateRakeRecordRequest,
    user: StaffUser = Depends(require_floor),
    db: AsyncSession = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    try:
        record = await RakeService(db, notifier=notifier).record_rake(
            table_session_id=request.table_session_id,
            pot_amount=request.pot_amount,
            rake_amount=request.rake_amount,
            tip_amount=request.tip_amount,
            player_id=request.player_id,
        )
    except LedgerException as e:
        raise to_http_exception(e)

    return RakeRecordResponse.model_validate(record)


@router.get("", response_model=SessionRakeResponse)
async def get_session_rake(
    table_session_id: UUID,
    user: StaffUser = Depends(require_floor),
    db: AsyncSession = Depends(get_db),
):
    session_rake = await RakeService(db).session_rake(table_session_id)
    return SessionRakeResponse(
        records=[RakeRecordResponse.model_validate(r) for r in session_rake.records],
        total_rake=session_rake.total_rake,
        total_pots=session_rake.total_pots,
    )
