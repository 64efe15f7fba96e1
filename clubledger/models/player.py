"""Player model (rakeback fields only; the full profile lives in the player directory)."""
from sqlalchemy import Column, String, Numeric, DateTime
import uuid
from datetime import datetime, UTC
from clubledger.database import Base
from clubledger.models.base import get_uuid_column


class Player(Base):
    """Minimal player row referenced by the ledger."""
    __tablename__ = "players"

    player_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, default="")
    rakeback_percent = Column(Numeric(5, 2, asdecimal=True), nullable=False, default=0)  # 0-100
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self):
        return f"<Player(player_id={self.player_id}, name={self.full_name!r})>"
