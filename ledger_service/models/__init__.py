"""
Database models package.
"""

from ledger_service.models.account import Account
from ledger_service.models.user import User
from ledger_service.models.transaction import Transaction, TransactionType

__all__ = ["Account", "User", "Transaction", "TransactionType"]
