"""
Transfer API endpoints.
Handles money transfers between accounts and transaction history.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from ledger_service.api.deps import get_current_user
from ledger_service.database import get_db
from ledger_service.models.user import User
from ledger_service.schemas.transaction import TransferRequest, TransactionResponse
from ledger_service.services import directory, history
from ledger_service.services.transfers import transfer

router = APIRouter(prefix="/transfers", tags=["Transfers"])


@router.post("/", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transfer(
    transfer_data: TransferRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Move funds from one of the caller's accounts to any account.

    The ledger entry and both balance changes commit together or not at all.

    - **from_account**: Source account (must belong to the caller)
    - **to_account**: Destination account
    - **amount**: Transfer amount (positive, at most two decimal places)
    - **description**: Optional transfer description
    """
    return transfer(
        db,
        from_account=transfer_data.from_account,
        to_account=transfer_data.to_account,
        amount=transfer_data.amount,
        description=transfer_data.description,
        requesting_user_id=current_user.id
    )


@router.get("/", response_model=List[TransactionResponse])
def list_my_transfers(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    All transfers touching any of the caller's accounts, newest first.

    - **skip**: Number of records to skip (default: 0)
    - **limit**: Maximum number of records to return (default: 100)
    """
    return history.history_for_owner(db, current_user.id, skip=skip, limit=limit)


@router.get("/account/{account_number}", response_model=List[TransactionResponse])
def get_account_transfers(
    account_number: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Transfers sent or received by one of the caller's accounts, newest first.
    Accounts the caller does not own are reported as not found.
    """
    directory.get_owned_account(db, account_number, current_user.id)
    return history.history_for_account(db, account_number, skip=skip, limit=limit)
