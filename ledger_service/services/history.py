"""
History queries over the append-only ledger.

Plain reads: no row locks, read-committed snapshots are good enough.
"""

from decimal import Decimal
from typing import List

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from ledger_service.core.config import settings
from ledger_service.models.account import Account
from ledger_service.models.transaction import Transaction

# Newest first; id breaks created_at ties in insertion order
NEWEST_FIRST = (Transaction.created_at.desc(), Transaction.id.desc())


def history_for_account(db: Session, account_number: str, skip: int = 0, limit: int = 100) -> List[Transaction]:
    """Entries where the account is sender or recipient, newest first."""
    query = (
        select(Transaction)
        .where(
            or_(
                Transaction.from_account == account_number,
                Transaction.to_account == account_number,
            )
        )
        .order_by(*NEWEST_FIRST)
        .offset(skip)
        .limit(limit)
    )
    return list(db.execute(query).scalars())


def history_for_owner(db: Session, owner_id: int, skip: int = 0, limit: int = 100) -> List[Transaction]:
    """
    Entries touching any of the owner's accounts, newest first.

    A single query over the owner's account set, so a transfer between two
    of the owner's own accounts comes back once.
    """
    owned = select(Account.account_number).where(Account.owner_id == owner_id)
    query = (
        select(Transaction)
        .where(
            or_(
                Transaction.from_account.in_(owned),
                Transaction.to_account.in_(owned),
            )
        )
        .order_by(*NEWEST_FIRST)
        .offset(skip)
        .limit(limit)
    )
    return list(db.execute(query).scalars())


def replayed_balance(db: Session, account_number: str) -> Decimal:
    """
    Recompute a balance from the ledger: opening balance plus credits
    minus debits. Matches Account.balance as long as nothing writes
    balances outside the transfer engine.
    """
    credits = db.scalar(
        select(func.coalesce(func.sum(Transaction.amount), 0)).where(Transaction.to_account == account_number)
    )
    debits = db.scalar(
        select(func.coalesce(func.sum(Transaction.amount), 0)).where(Transaction.from_account == account_number)
    )
    return (Decimal(settings.OPENING_BALANCE) + Decimal(str(credits)) - Decimal(str(debits))).quantize(Decimal("0.01"))
