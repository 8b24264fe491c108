"""
Transfer engine.

Moves funds between two accounts and appends one ledger entry, all inside
a single database transaction:

- both account rows are locked (SELECT ... FOR UPDATE) in ascending
  account-number order, so transfers touching the same account serialize
  and opposite-direction transfers cannot deadlock;
- preconditions are checked against the locked rows;
- the ledger insert, debit and credit are committed together, or the
  whole transaction is rolled back.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledger_service.core.config import settings
from ledger_service.core.exceptions import (
    AccountNotFound,
    InsufficientFunds,
    InvalidAmount,
    LedgerError,
    SameAccountTransfer,
    StorageFailure,
    Unauthorized,
)
from ledger_service.models.account import Account
from ledger_service.models.transaction import Transaction, TransactionType

logger = logging.getLogger(__name__)

MINOR_UNIT = Decimal("0.01")


def parse_amount(amount) -> Decimal:
    """
    Parse an amount into an exact Decimal.

    Floats go through str() so 0.1 stays 0.1 rather than its binary
    expansion. Raises InvalidAmount for anything that is not a finite,
    positive number with at most two decimal places.
    """
    if isinstance(amount, bool) or amount is None:
        raise InvalidAmount(amount)
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmount(amount)

    if not value.is_finite() or value <= 0:
        raise InvalidAmount(amount)
    if _decimal_places(value) > 2:
        raise InvalidAmount(amount)
    return value


def _decimal_places(value: Decimal) -> int:
    # Read off the digit tuple; no context arithmetic, so huge values cannot overflow
    _, digits, exponent = value.as_tuple()
    trailing_zeros = 0
    for digit in reversed(digits):
        if digit:
            break
        trailing_zeros += 1
    return max(0, -(exponent + trailing_zeros))


def _apply_timeout(db: Session) -> None:
    # SET LOCAL only lives until the end of the current transaction
    if db.get_bind().dialect.name == "postgresql":
        timeout_ms = int(settings.TRANSFER_TIMEOUT_MS)
        db.execute(text(f"SET LOCAL lock_timeout = {timeout_ms}"))
        db.execute(text(f"SET LOCAL statement_timeout = {timeout_ms}"))


def _lock_accounts(db: Session, *account_numbers: str) -> dict:
    """Lock the given accounts in ascending number order; missing ones are absent."""
    locked = {}
    for account_number in sorted(set(account_numbers)):
        account = db.execute(
            select(Account).where(Account.account_number == account_number).with_for_update()
        ).scalar_one_or_none()
        if account is not None:
            locked[account_number] = account
    return locked


def transfer(
    db: Session,
    from_account: str,
    to_account: str,
    amount,
    description: Optional[str],
    requesting_user_id: int,
) -> Transaction:
    """
    Transfer ``amount`` from ``from_account`` to ``to_account`` on behalf of
    ``requesting_user_id``.

    Checks run in this order and the first failure wins: both accounts
    exist, the caller owns the sender, the amount is valid, the sender can
    cover it, the accounts differ.

    Raises a LedgerError subclass on any failure. Business-rule failures
    are terminal; StorageFailure means the store gave up and nothing was
    applied, so the caller may retry.
    """
    try:
        _apply_timeout(db)
        locked = _lock_accounts(db, from_account, to_account)

        sender = locked.get(from_account)
        if sender is None:
            raise AccountNotFound(from_account, role="sender")
        recipient = locked.get(to_account)
        if recipient is None:
            raise AccountNotFound(to_account, role="recipient")

        if sender.owner_id != requesting_user_id:
            raise Unauthorized(from_account)

        value = parse_amount(amount)

        if sender.balance < value:
            raise InsufficientFunds(from_account, sender.balance, value)

        if from_account == to_account:
            raise SameAccountTransfer(from_account)

        # Bounded by the balance now, so this cannot overflow the context
        value = value.quantize(MINOR_UNIT)

        record = Transaction(
            from_account=from_account,
            to_account=to_account,
            amount=value,
            type=TransactionType.TRANSFER,
            description=description,
        )
        db.add(record)
        sender.balance -= value
        recipient.balance += value

        # Flushed values (id, created_at) stay on the detached record, so
        # nothing has to be reloaded once the transfer is committed
        db.flush()
        db.expunge(record)
        db.commit()
    except LedgerError as e:
        db.rollback()
        logger.warning("Transfer %s -> %s rejected: %s", from_account, to_account, e.kind)
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Transfer %s -> %s aborted by storage", from_account, to_account)
        raise StorageFailure(f"Transfer failed: {e}") from e

    logger.info(
        "Transferred %s from %s to %s (transaction %s)",
        record.amount, from_account, to_account, record.id,
    )
    return record
