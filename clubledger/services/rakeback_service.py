"""Rakeback calculator."""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable
from uuid import UUID
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from clubledger.models.base import TransactionType
from clubledger.models.player import Player
from clubledger.models.rake_record import RakeRecord
from clubledger.models.transaction import Transaction
from clubledger.utils.exceptions import NotFoundError
from clubledger.utils.money import CENT, ZERO, to_money

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


@dataclass
class RakebackEntry:
    player: Player
    total_rake_contributed: Decimal
    rakeback_percent: Decimal
    rakeback_earned: Decimal
    total_paid_out: Decimal
    rakeback_balance: Decimal


def compute_rakeback(
    player: Player,
    total_rake_contributed: Decimal,
    total_paid_out: Decimal,
) -> RakebackEntry:
    """Apply the player's current percent to their lifetime rake.

    The balance goes negative when the percent was lowered after payouts had
    already exceeded the new entitlement; that is reported as-is.
    """
    percent = Decimal(str(player.rakeback_percent or 0))
    earned = (total_rake_contributed * percent / HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)
    return RakebackEntry(
        player=player,
        total_rake_contributed=total_rake_contributed,
        rakeback_percent=percent,
        rakeback_earned=earned,
        total_paid_out=total_paid_out,
        rakeback_balance=earned - total_paid_out,
    )


class RakebackService:
    """Derive rakeback entitlement from rake attribution and payouts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def rakeback_for(self, player_id: UUID) -> RakebackEntry:
        player = await self.db.get(Player, player_id)
        if player is None:
            raise NotFoundError("Player", player_id)

        rake = await self._rake_by_player([player_id])
        paid = await self._payouts_by_player([player_id])
        return compute_rakeback(player, rake.get(player_id, ZERO), paid.get(player_id, ZERO))

    async def rakeback_for_all(self) -> list[RakebackEntry]:
        """Entries for every player with a rakeback percent above zero."""
        result = await self.db.execute(
            select(Player)
            .where(Player.rakeback_percent > 0)
            .order_by(Player.first_name, Player.last_name, Player.player_id)
        )
        players = list(result.scalars().all())
        if not players:
            return []

        player_ids = [player.player_id for player in players]
        rake = await self._rake_by_player(player_ids)
        paid = await self._payouts_by_player(player_ids)

        return [
            compute_rakeback(
                player,
                rake.get(player.player_id, ZERO),
                paid.get(player.player_id, ZERO),
            )
            for player in players
        ]

    async def _rake_by_player(self, player_ids: Iterable[UUID]) -> dict[UUID, Decimal]:
        result = await self.db.execute(
            select(RakeRecord.player_id, func.coalesce(func.sum(RakeRecord.rake_amount), 0))
            .where(RakeRecord.player_id.in_(list(player_ids)))
            .group_by(RakeRecord.player_id)
        )
        return {player_id: to_money(total) for player_id, total in result.all()}

    async def _payouts_by_player(self, player_ids: Iterable[UUID]) -> dict[UUID, Decimal]:
        result = await self.db.execute(
            select(Transaction.player_id, func.coalesce(func.sum(Transaction.amount), 0))
            .where(
                Transaction.player_id.in_(list(player_ids)),
                Transaction.type == TransactionType.RAKEBACK_PAYOUT.value,
            )
            .group_by(Transaction.player_id)
        )
        return {player_id: to_money(total) for player_id, total in result.all()}
