"""
Account directory: lookup of accounts and the account-creation policy.
"""

import logging
import secrets
from typing import Callable, List

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ledger_service.core.config import settings
from ledger_service.core.exceptions import (
    AccountLimitExceeded,
    AccountNotFound,
    AccountNumberCollision,
    LedgerError,
    StorageFailure,
    UserNotFound,
)
from ledger_service.models.account import Account
from ledger_service.models.user import User

logger = logging.getLogger(__name__)

ACCOUNT_NUMBER_LOW = 1_000_000_000
ACCOUNT_NUMBER_SPAN = 9_000_000_000


def generate_account_number() -> str:
    """Draw a uniformly random 10-digit account number (no leading zero)."""
    return str(ACCOUNT_NUMBER_LOW + secrets.randbelow(ACCOUNT_NUMBER_SPAN))


def _number_taken(db: Session, account_number: str) -> bool:
    return db.scalar(
        select(func.count()).select_from(Account).where(Account.account_number == account_number)
    ) > 0


def _insert_with_unique_number(db: Session, owner: User, number_factory: Callable[[], str]) -> Account:
    """
    Generate-check-insert loop. Each insert runs in a SAVEPOINT so a
    unique-constraint race only discards that attempt, not the caller's
    transaction.
    """
    attempts = settings.ACCOUNT_NUMBER_MAX_ATTEMPTS
    for attempt in range(1, attempts + 1):
        account_number = number_factory()
        if _number_taken(db, account_number):
            logger.warning("Account number collision on attempt %d/%d", attempt, attempts)
            continue

        account = Account(
            account_number=account_number,
            owner_id=owner.id,
            balance=settings.OPENING_BALANCE,
        )
        try:
            with db.begin_nested():
                db.add(account)
        except IntegrityError:
            logger.warning("Account number %s taken concurrently, retrying", account_number)
            continue
        return account

    raise AccountNumberCollision(attempts)


def create_account(
    db: Session,
    owner_id: int,
    number_factory: Callable[[], str] = generate_account_number,
    commit: bool = True,
) -> Account:
    """
    Open a new account for ``owner_id`` with the opening balance.

    The owner row is locked first so two concurrent creations for the same
    user cannot both slip under the per-user cap. With ``commit=False`` the
    new account is flushed but left for the caller to commit.
    """
    try:
        owner = db.execute(
            select(User).where(User.id == owner_id).with_for_update()
        ).scalar_one_or_none()
        if owner is None:
            raise UserNotFound(owner_id)

        owned = db.scalar(select(func.count()).select_from(Account).where(Account.owner_id == owner_id))
        if owned >= settings.MAX_ACCOUNTS_PER_USER:
            raise AccountLimitExceeded(owner_id, settings.MAX_ACCOUNTS_PER_USER)

        account = _insert_with_unique_number(db, owner, number_factory)

        if commit:
            db.commit()
            db.refresh(account)
    except LedgerError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Account creation for user %s failed in storage", owner_id)
        raise StorageFailure(f"Account creation failed: {e}") from e

    logger.info("Opened account %s for user %s", account.account_number, owner_id)
    return account


def find_by_account_number(db: Session, account_number: str) -> Account:
    account = db.execute(
        select(Account).where(Account.account_number == account_number)
    ).scalar_one_or_none()
    if account is None:
        raise AccountNotFound(account_number)
    return account


def get_owned_account(db: Session, account_number: str, owner_id: int) -> Account:
    """
    Fetch an account only if ``owner_id`` owns it. Someone else's account
    is reported as not found, so callers cannot discover other owners' numbers.
    """
    account = db.execute(
        select(Account).where(
            Account.account_number == account_number,
            Account.owner_id == owner_id,
        )
    ).scalar_one_or_none()
    if account is None:
        raise AccountNotFound(account_number)
    return account


def list_by_owner(db: Session, owner_id: int) -> List[Account]:
    """All accounts of an owner, sorted by account number ascending."""
    return list(
        db.execute(
            select(Account).where(Account.owner_id == owner_id).order_by(Account.account_number.asc())
        ).scalars()
    )
