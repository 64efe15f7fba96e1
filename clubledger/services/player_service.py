"""Player lookups and rakeback configuration."""
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from clubledger.models.player import Player
from clubledger.services.change_notifier import ChangeNotifier
from clubledger.utils.exceptions import InvalidRakebackPercentError, NotFoundError

logger = logging.getLogger(__name__)

PERCENT_PLACES = Decimal("0.01")


def parse_rakeback_percent(value) -> Decimal:
    try:
        percent = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise InvalidRakebackPercentError(f"Invalid rakeback percent: {value!r}") from exc
    if not percent.is_finite() or percent < 0 or percent > 100:
        raise InvalidRakebackPercentError("Rakeback percent must be between 0 and 100")
    return percent.quantize(PERCENT_PLACES)


class PlayerService:
    def __init__(self, db: AsyncSession, notifier: Optional[ChangeNotifier] = None):
        self.db = db
        self.notifier = notifier

    async def get_player(self, player_id: UUID) -> Player:
        player = await self.db.get(Player, player_id)
        if player is None:
            raise NotFoundError("Player", player_id)
        return player

    async def set_rakeback_percent(self, player_id: UUID, percent) -> Player:
        """Change a player's rakeback percent; applies to lifetime rake."""
        percent = parse_rakeback_percent(percent)
        player = await self.get_player(player_id)

        old_percent = player.rakeback_percent
        player.rakeback_percent = percent
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Rakeback percent changed: player={player_id}, {old_percent} -> {percent}")
        if self.notifier:
            self.notifier.bump("rakeback_percent")
        return player
