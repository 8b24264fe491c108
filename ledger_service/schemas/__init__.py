"""
Pydantic schemas package.
"""

from ledger_service.schemas.account import AccountResponse, AccountList, AccountBalance, AccountLookup
from ledger_service.schemas.transaction import TransferRequest, TransactionResponse
from ledger_service.schemas.user import UserRegister, UserLogin, RegisteredUser, Token

__all__ = [
    "AccountResponse",
    "AccountList",
    "AccountBalance",
    "AccountLookup",
    "TransferRequest",
    "TransactionResponse",
    "UserRegister",
    "UserLogin",
    "RegisteredUser",
    "Token"
]
