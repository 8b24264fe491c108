"""
Account API endpoints.
Handles account creation, lookup, and balance queries.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ledger_service.api.deps import get_current_user
from ledger_service.database import get_db
from ledger_service.models.user import User
from ledger_service.schemas.account import AccountResponse, AccountList, AccountBalance, AccountLookup
from ledger_service.services import directory

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("/", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Open a new account for the caller with the opening balance.
    A user can hold at most four accounts.
    """
    return directory.create_account(db, current_user.id)


@router.get("/", response_model=AccountList)
def list_accounts(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    List the caller's accounts, sorted by account number.
    """
    return AccountList(
        user_id=current_user.id,
        accounts=directory.list_by_owner(db, current_user.id)
    )


@router.get("/{account_number}", response_model=AccountLookup)
def lookup_account(
    account_number: str,
    db: Session = Depends(get_db)
):
    """
    Look up who owns an account number, e.g. before sending money to it.
    """
    account = directory.find_by_account_number(db, account_number)
    return AccountLookup(account_number=account.account_number, owner_name=account.owner.name)


@router.get("/{account_number}/balance", response_model=AccountBalance)
def get_account_balance(
    account_number: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get the balance of one of the caller's accounts.
    """
    return directory.get_owned_account(db, account_number, current_user.id)
