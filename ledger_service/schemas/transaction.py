"""
Pydantic schemas for Transfer API requests and responses.
"""

from pydantic import BaseModel, Field, ConfigDict
from decimal import Decimal
from datetime import datetime
from typing import Optional, Union
from ledger_service.models.transaction import TransactionType

ACCOUNT_NUMBER_PATTERN = r"^\d{10}$"


class TransferRequest(BaseModel):
    """
    Schema for initiating a transfer.

    ``amount`` is passed through as sent; the transfer engine validates it
    after the account checks so the caller gets its error kind.
    """
    from_account: str = Field(..., pattern=ACCOUNT_NUMBER_PATTERN, description="Source account number")
    to_account: str = Field(..., pattern=ACCOUNT_NUMBER_PATTERN, description="Destination account number")
    amount: Union[Decimal, str, int, float] = Field(
        ..., description="Transfer amount (positive, at most two decimal places)"
    )
    description: Optional[str] = Field(None, max_length=500, description="Optional transfer description")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "from_account": "1234567890",
                "to_account": "9876543210",
                "amount": 250.00,
                "description": "Payment for services"
            }
        }
    )


class TransactionResponse(BaseModel):
    """Schema for a ledger entry."""
    from_account: str
    to_account: str
    amount: Decimal
    type: TransactionType
    description: Optional[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
