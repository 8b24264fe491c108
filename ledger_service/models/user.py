"""
User database model.
"""

from sqlalchemy import Column, String, DateTime, Integer
from sqlalchemy.orm import relationship
from ledger_service.database import Base
from ledger_service.models.account import Account, utcnow


class User(Base):
    """
    Users table. Owned accounts hang off ``accounts`` in creation order.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    accounts = relationship("Account", back_populates="owner", order_by=Account.id)

    @property
    def account_numbers(self):
        return [account.account_number for account in self.accounts]

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
