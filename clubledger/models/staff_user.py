"""Staff user model (identity is owned by the auth collaborator)."""
from sqlalchemy import Column, String, Boolean, DateTime
import uuid
from datetime import datetime, UTC
from clubledger.database import Base
from clubledger.models.base import get_uuid_column


class StaffUser(Base):
    """Cashier, admin, pit boss or dealer who records ledger activity."""
    __tablename__ = "staff_users"

    user_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False)  # ADMIN | CASHIER | PITBOSS | DEALER
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    def __repr__(self):
        return f"<StaffUser(user_id={self.user_id}, name={self.name!r}, role={self.role})>"
