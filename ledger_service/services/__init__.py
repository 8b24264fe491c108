"""
Ledger services: account directory, transfer engine, history and users.
"""

from ledger_service.services.directory import (
    create_account,
    find_by_account_number,
    generate_account_number,
    get_owned_account,
    list_by_owner,
)
from ledger_service.services.history import history_for_account, history_for_owner, replayed_balance
from ledger_service.services.transfers import parse_amount, transfer
from ledger_service.services.users import authenticate, get_user, register_user

__all__ = [
    "create_account",
    "find_by_account_number",
    "generate_account_number",
    "get_owned_account",
    "list_by_owner",
    "history_for_account",
    "history_for_owner",
    "replayed_balance",
    "parse_amount",
    "transfer",
    "authenticate",
    "get_user",
    "register_user",
]
