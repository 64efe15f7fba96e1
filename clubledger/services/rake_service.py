"""Rake attribution store."""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clubledger.config import get_settings
from clubledger.models.player import Player
from clubledger.models.rake_record import RakeRecord
from clubledger.services.change_notifier import ChangeNotifier
from clubledger.utils.datetime_helpers import utc_now
from clubledger.utils.exceptions import InvalidAmountError, NotFoundError
from clubledger.utils.money import ZERO, parse_amount, to_money

logger = logging.getLogger(__name__)


@dataclass
class SessionRake:
    records: list[RakeRecord]
    total_rake: Decimal
    total_pots: Decimal


def _non_negative(value, field_name: str) -> Decimal:
    try:
        amount = parse_amount(value)
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise InvalidAmountError(f"{field_name} must be a number with at most two decimal places") from exc
    if amount < ZERO:
        raise InvalidAmountError(f"{field_name} cannot be negative")
    return amount


class RakeService:
    """Record per-hand rake and read it back per table session."""

    def __init__(self, db: AsyncSession, notifier: Optional[ChangeNotifier] = None):
        self.db = db
        self.notifier = notifier
        self.settings = get_settings()

    async def record_rake(
        self,
        table_session_id: UUID,
        pot_amount,
        rake_amount,
        tip_amount=None,
        player_id: UUID | None = None,
    ) -> RakeRecord:
        """Store the rake for one pot.

        A pot smaller than rake plus tip is accepted but logged, since dealers
        occasionally enter the rake before correcting the pot.

        Raises:
            InvalidAmountError: If an amount is negative or not numeric
            NotFoundError: If ``player_id`` is not a known player
        """
        pot = _non_negative(pot_amount, "potAmount")
        rake = _non_negative(rake_amount, "rakeAmount")
        tip = _non_negative(tip_amount, "tipAmount") if tip_amount is not None else ZERO

        if player_id is not None and await self.db.get(Player, player_id) is None:
            raise NotFoundError("Player", player_id)

        if pot < rake + tip:
            logger.warning(
                f"Rake exceeds pot: session={table_session_id}, pot={pot}, rake={rake}, tip={tip}"
            )

        record = RakeRecord(
            rake_record_id=uuid.uuid4(),
            table_session_id=table_session_id,
            pot_amount=pot,
            rake_amount=rake,
            tip_amount=tip,
            player_id=player_id,
            created_at=utc_now(),
        )
        self.db.add(record)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            f"Rake recorded: session={table_session_id}, pot={pot}, rake={rake}, "
            f"tip={tip}, player={player_id}"
        )
        if self.notifier:
            self.notifier.bump("rake")
        return record

    async def session_rake(self, table_session_id: UUID) -> SessionRake:
        """Most recent rake records for a table session with their totals."""
        result = await self.db.execute(
            select(RakeRecord)
            .where(RakeRecord.table_session_id == table_session_id)
            .order_by(RakeRecord.created_at.desc(), RakeRecord.rake_record_id)
            .limit(self.settings.rake_history_limit)
        )
        records = list(result.scalars().all())
        return SessionRake(
            records=records,
            total_rake=sum((to_money(r.rake_amount) for r in records), ZERO),
            total_pots=sum((to_money(r.pot_amount) for r in records), ZERO),
        )
