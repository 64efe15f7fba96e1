"""Bank account model."""
from sqlalchemy import Column, String, Boolean, DateTime, Index, text
import uuid
from datetime import datetime, UTC
from clubledger.database import Base
from clubledger.models.base import get_uuid_column


class BankAccount(Base):
    """Named bank money channel; deactivated rather than deleted."""
    __tablename__ = "bank_accounts"

    bank_account_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    # Names only need to be unique among active accounts
    __table_args__ = (
        Index(
            "uq_bank_accounts_active_name",
            "name",
            unique=True,
            sqlite_where=text("active = 1"),
            postgresql_where=text("active"),
        ),
    )

    def __repr__(self):
        return f"<BankAccount(bank_account_id={self.bank_account_id}, name={self.name!r}, active={self.active})>"
