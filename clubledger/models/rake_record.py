"""Rake record model."""
from sqlalchemy import Column, DateTime, ForeignKey, Index
import uuid
from datetime import datetime, UTC
from clubledger.database import Base
from clubledger.models.base import get_uuid_column, money_column


class RakeRecord(Base):
    """House cut for one pot, entered by the dealer of a table session."""
    __tablename__ = "rake_records"

    rake_record_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    table_session_id = get_uuid_column(nullable=False, index=True)  # Owned by the table collaborator
    pot_amount = money_column(nullable=False)
    rake_amount = money_column(nullable=False)
    tip_amount = money_column(nullable=False, default=0)
    player_id = get_uuid_column(ForeignKey("players.player_id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False, index=True)

    __table_args__ = (
        Index("ix_rake_records_session_created", "table_session_id", "created_at"),
    )

    def __repr__(self):
        return (f"<RakeRecord(rake_record_id={self.rake_record_id}, pot={self.pot_amount}, "
                f"rake={self.rake_amount}, tip={self.tip_amount})>")
