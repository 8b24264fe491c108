"""
Pydantic schemas for Account API responses.
"""

from pydantic import BaseModel, ConfigDict
from decimal import Decimal
from datetime import datetime
from typing import List


class AccountResponse(BaseModel):
    """Schema for account response."""
    account_number: str
    owner_id: int
    balance: Decimal
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AccountList(BaseModel):
    """Schema for the caller's accounts."""
    user_id: int
    accounts: List[AccountResponse]


class AccountBalance(BaseModel):
    """Schema for account balance response."""
    account_number: str
    balance: Decimal

    model_config = ConfigDict(from_attributes=True)


class AccountLookup(BaseModel):
    """Public view of an account: who a transfer would go to."""
    account_number: str
    owner_name: str
