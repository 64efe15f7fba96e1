"""Player rakeback configuration router."""
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clubledger.database import get_db
from clubledger.dependencies import get_change_notifier, require_admin
from clubledger.models.staff_user import StaffUser
from clubledger.routers.errors import to_http_exception
from clubledger.schemas.player import PlayerResponse, UpdateRakebackPercentRequest
from clubledger.services import ChangeNotifier, PlayerService
from clubledger.utils.exceptions import LedgerException

router = APIRouter()


@router.put("/{player_id}/rakeback-percent", response_model=PlayerResponse)
async def update_rakeback_percent(
    player_id: UUID,
    request: UpdateRakebackPercentRequest,
    user: StaffUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    try:
        player = await PlayerService(db, notifier=notifier).set_rakeback_percent(
            player_id, request.rakeback_percent
        )
    except LedgerException as e:
        raise to_http_exception(e)

    return PlayerResponse.model_validate(player)
