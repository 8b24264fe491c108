"""
Transaction database model.
Append-only ledger of fund movements between accounts.
"""

from sqlalchemy import Column, String, Numeric, DateTime, Integer, Index, Enum as SQLEnum
from ledger_service.database import Base
from ledger_service.models.account import utcnow
import enum


class TransactionType(str, enum.Enum):
    """Ledger entry classifications. Only transfers are produced today."""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRANSFER = "transfer"


class Transaction(Base):
    """
    Transactions table - one row per successful transfer, never updated.

    Account numbers are stored as plain values, not foreign keys: an entry
    only refers back to the accounts it moved money between.
    """
    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_from_to_created", "from_account", "to_account", "created_at"),
        Index("ix_transactions_to_account", "to_account"),
    )

    id = Column(Integer, primary_key=True, index=True)
    from_account = Column(String(10), nullable=False)
    to_account = Column(String(10), nullable=False)
    amount = Column(Numeric(precision=15, scale=2), nullable=False)
    type = Column(SQLEnum(TransactionType), nullable=False, default=TransactionType.TRANSFER)
    description = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Transaction(id={self.id}, from={self.from_account}, to={self.to_account}, amount={self.amount})>"
