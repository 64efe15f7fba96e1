"""Rakeback schemas."""
from uuid import UUID
from clubledger.schemas.base import BaseSchema, Money
from clubledger.services.rakeback_service import RakebackEntry


class RakebackPlayer(BaseSchema):
    player_id: UUID
    first_name: str
    last_name: str
    rakeback_percent: Money


class RakebackEntryResponse(BaseSchema):
    player: RakebackPlayer
    total_rake_contributed: Money
    rakeback_percent: Money
    rakeback_earned: Money
    total_paid_out: Money
    rakeback_balance: Money

    @classmethod
    def from_entry(cls, entry: RakebackEntry) -> "RakebackEntryResponse":
        return cls(
            player=RakebackPlayer.model_validate(entry.player),
            total_rake_contributed=entry.total_rake_contributed,
            rakeback_percent=entry.rakeback_percent,
            rakeback_earned=entry.rakeback_earned,
            total_paid_out=entry.total_paid_out,
            rakeback_balance=entry.rakeback_balance,
        )
