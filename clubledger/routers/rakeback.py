"""Rakeback API router."""
from typing import Optional, Union
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clubledger.database import get_db
from clubledger.dependencies import require_cashier
from clubledger.models.staff_user import StaffUser
from clubledger.routers.errors import to_http_exception
from clubledger.schemas.rakeback import RakebackEntryResponse
from clubledger.services import RakebackService
from clubledger.utils.exceptions import LedgerException

router = APIRouter()


@router.get("", response_model=Union[RakebackEntryResponse, list[RakebackEntryResponse]])
async def get_rakeback(
    player_id: Optional[UUID] = None,
    user: StaffUser = Depends(require_cashier),
    db: AsyncSession = Depends(get_db),
):
    """Rakeback for one player, or for every player with a percent above zero."""
    rakeback_service = RakebackService(db)
    if player_id is not None:
        try:
            entry = await rakeback_service.rakeback_for(player_id)
        except LedgerException as e:
            raise to_http_exception(e)
        return RakebackEntryResponse.from_entry(entry)

    entries = await rakeback_service.rakeback_for_all()
    return [RakebackEntryResponse.from_entry(entry) for entry in entries]
