"""Transaction ledger model."""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime, UTC
from clubledger.database import Base
from clubledger.models.base import get_uuid_column, money_column


class Transaction(Base):
    """Append-only ledger entry. Rows are never updated or deleted."""
    __tablename__ = "ledger_transactions"

    transaction_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    player_id = get_uuid_column(ForeignKey("players.player_id"), nullable=False, index=True)
    type = Column(String(20), nullable=False, index=True)
    # Types: BUY_IN, CASH_OUT, DEPOSIT, WITHDRAWAL, RAKEBACK_PAYOUT
    amount = money_column(nullable=False)  # Always positive; direction comes from type
    payment_method = Column(String(10), nullable=True)  # CASH | BANK, buy-ins and cash-outs only
    bank_account_id = get_uuid_column(ForeignKey("bank_accounts.bank_account_id"), nullable=True)
    channel = Column(String(64), nullable=True)  # Channel key, NULL for rakeback payouts
    notes = Column(Text, nullable=True)
    recorded_by_user_id = get_uuid_column(ForeignKey("staff_users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False, index=True)

    # Relationships
    player = relationship("Player", lazy="raise")
    recorded_by = relationship("StaffUser", lazy="raise")
    bank_account = relationship("BankAccount", lazy="raise")

    # Indexes
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_ledger_transactions_amount_positive"),
        Index("ix_ledger_transactions_channel_created", "channel", "created_at"),
        Index("ix_ledger_transactions_player_type", "player_id", "type"),
    )

    def __repr__(self):
        return (f"<Transaction(transaction_id={self.transaction_id}, type={self.type}, "
                f"amount={self.amount}, channel={self.channel})>")
