"""
Account database model.
Represents balance-holding ledger accounts.
"""

from sqlalchemy import Column, String, Numeric, DateTime, Integer, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from ledger_service.database import Base


def utcnow():
    return datetime.now(timezone.utc)


class Account(Base):
    """
    Account table - one row per 10-digit account number.

    ``balance`` is a cached projection of the ledger; only the transfer
    engine writes it after the account is created.
    """
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    account_number = Column(String(10), unique=True, index=True, nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    balance = Column(Numeric(precision=15, scale=2), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    owner = relationship("User", back_populates="accounts")

    def __repr__(self):
        return f"<Account(account_number={self.account_number}, owner_id={self.owner_id}, balance={self.balance})>"
