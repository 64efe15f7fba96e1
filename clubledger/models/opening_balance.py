"""Opening balance model."""
from sqlalchemy import Column, String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime, UTC
from clubledger.database import Base
from clubledger.models.base import get_uuid_column, money_column


class OpeningBalance(Base):
    """Administrator-declared starting amount for one channel on one day."""
    __tablename__ = "opening_balances"

    opening_balance_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    date = Column(Date, nullable=False, index=True)
    channel = Column(String(64), nullable=False)  # CASH | DEPOSITS | bank account id
    amount = money_column(nullable=False, default=0)
    entry_time = Column(String(8), nullable=False)  # Time of entry as typed, e.g. "18:00"
    set_by_user_id = get_uuid_column(ForeignKey("staff_users.user_id"), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    set_by = relationship("StaffUser", lazy="raise")

    __table_args__ = (
        UniqueConstraint("date", "channel", name="uq_opening_balances_date_channel"),
    )

    def __repr__(self):
        return f"<OpeningBalance(date={self.date}, channel={self.channel}, amount={self.amount})>"
