"""
Error taxonomy for ledger operations.

Every error carries a stable machine-readable ``kind`` and the HTTP status
the API layer answers with. Business-rule errors are deterministic for a
given input; only ``StorageFailure`` is worth retrying.
"""


class LedgerError(Exception):
    """Base class for all ledger errors."""

    kind = "ledger_error"
    status_code = 500
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "kind": self.kind}


class AccountNotFound(LedgerError):
    kind = "not_found"
    status_code = 404

    def __init__(self, account_number: str, role: str = "account"):
        self.account_number = account_number
        self.role = role
        label = {"sender": "Sender account", "recipient": "Recipient account"}.get(role, "Account")
        super().__init__(f"{label} {account_number} not found")


class UserNotFound(LedgerError):
    kind = "not_found"
    status_code = 404

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class Unauthorized(LedgerError):
    kind = "unauthorized"
    status_code = 403

    def __init__(self, account_number: str):
        self.account_number = account_number
        super().__init__(f"You are not authorized to transfer from account {account_number}")


class InvalidAmount(LedgerError):
    kind = "invalid_amount"
    status_code = 400

    def __init__(self, amount):
        self.amount = amount
        super().__init__(
            f"Invalid amount {amount!r}: must be a positive number with at most two decimal places"
        )


class InsufficientFunds(LedgerError):
    kind = "insufficient_funds"
    status_code = 400

    def __init__(self, account_number: str, balance, amount):
        self.account_number = account_number
        self.balance = balance
        self.amount = amount
        super().__init__(f"Insufficient funds. Balance: {balance}, Required: {amount}")


class SameAccountTransfer(LedgerError):
    kind = "invalid_request"
    status_code = 400

    def __init__(self, account_number: str):
        self.account_number = account_number
        super().__init__("Cannot transfer to the same account")


class AccountLimitExceeded(LedgerError):
    kind = "account_limit_exceeded"
    status_code = 400

    def __init__(self, owner_id, limit: int):
        self.owner_id = owner_id
        self.limit = limit
        super().__init__(f"Maximum number of accounts reached ({limit})")


class AccountNumberCollision(LedgerError):
    kind = "account_number_collision"
    status_code = 503

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Could not allocate a unique account number after {attempts} attempts")


class EmailAlreadyRegistered(LedgerError):
    kind = "conflict"
    status_code = 409

    def __init__(self, email: str):
        self.email = email
        super().__init__("User with this email already exists")


class InvalidCredentials(LedgerError):
    kind = "invalid_credentials"
    status_code = 401

    def __init__(self):
        super().__init__("Invalid credentials")


class StorageFailure(LedgerError):
    """The store was unreachable or aborted the transaction. Nothing was applied."""

    kind = "storage_failure"
    status_code = 503
    retryable = True
