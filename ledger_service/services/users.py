"""
User registration and credential checks.
"""

import logging
from typing import Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ledger_service.core.exceptions import (
    EmailAlreadyRegistered,
    InvalidCredentials,
    LedgerError,
    StorageFailure,
    UserNotFound,
)
from ledger_service.core.security import get_password_hash, verify_password
from ledger_service.models.account import Account
from ledger_service.models.user import User
from ledger_service.services.directory import create_account

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def register_user(db: Session, name: str, email: str, password: str) -> Tuple[User, Account]:
    """
    Create a user together with their first account.

    Both rows are committed in one transaction: a user never exists
    without the account registration promised them.
    """
    email = normalize_email(email)
    if db.execute(select(User.id).where(User.email == email)).first() is not None:
        raise EmailAlreadyRegistered(email)

    user = User(name=name, email=email, password_hash=get_password_hash(password))
    try:
        db.add(user)
        db.flush()
        account = create_account(db, user.id, commit=False)
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        raise EmailAlreadyRegistered(email) from e
    except LedgerError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Registration for %s failed in storage", email)
        raise StorageFailure(f"Registration failed: {e}") from e

    db.refresh(user)
    db.refresh(account)
    logger.info("Registered user %s with account %s", user.id, account.account_number)
    return user, account


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.execute(select(User).where(User.email == normalize_email(email))).scalar_one_or_none()
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentials()
    return user


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFound(user_id)
    return user
