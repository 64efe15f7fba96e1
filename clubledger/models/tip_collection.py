"""Tip collection model."""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime, UTC
from clubledger.database import Base
from clubledger.models.base import get_uuid_column, money_column


class TipCollection(Base):
    """Dealer tips physically handed to the cashier from a table."""
    __tablename__ = "tip_collections"

    tip_collection_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    table_id = get_uuid_column(nullable=False, index=True)  # Owned by the table collaborator
    table_name = Column(String(100), nullable=True)
    amount = money_column(nullable=False)
    notes = Column(Text, nullable=True)
    collected_by_user_id = get_uuid_column(ForeignKey("staff_users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False, index=True)

    collected_by = relationship("StaffUser", lazy="raise")

    def __repr__(self):
        return f"<TipCollection(tip_collection_id={self.tip_collection_id}, amount={self.amount})>"
