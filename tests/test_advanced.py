"""
Advanced tests for the ledger service.
Tests concurrency, stress, and invariants across many transfers.
"""

import pytest
from concurrent.futures import ThreadPoolExecutor, as_completed
import threading
import time
from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from ledger_service.core.config import settings
from ledger_service.core.exceptions import AccountLimitExceeded, InsufficientFunds, StorageFailure
from ledger_service.database import Base, build_engine
from ledger_service.services.directory import create_account, find_by_account_number, list_by_owner
from ledger_service.services.history import history_for_account, replayed_balance
from ledger_service.services.transfers import transfer
from ledger_service.services.users import register_user


def read_balance(session_factory, account_number):
    with session_factory() as session:
        return find_by_account_number(session, account_number).balance


# ==================== CONCURRENCY TESTS ====================

def test_concurrent_transfers_cannot_double_spend(session_factory, make_user):
    """
    Ten threads each try to move 1000 out of an account holding 5000.
    Exactly five succeed, the rest fail with insufficient funds, and the
    balance never goes negative.
    """
    owner_id, source = make_user(name="Racer")
    _, dest = make_user(name="Receiver")

    def attempt_transfer():
        with session_factory() as session:
            try:
                transfer(session, source, dest, 1000, None, owner_id)
                return "success"
            except InsufficientFunds:
                return "insufficient"

    with ThreadPoolExecutor(max_workers=10) as executor:
        futures = [executor.submit(attempt_transfer) for _ in range(10)]
        results = [future.result() for future in as_completed(futures)]

    assert results.count("success") == 5
    assert results.count("insufficient") == 5
    assert read_balance(session_factory, source) == Decimal("0")
    assert read_balance(session_factory, dest) == Decimal("10000")

    with session_factory() as session:
        assert len(history_for_account(session, source)) == 5


def test_concurrent_small_transfers_all_apply(session_factory, make_user):
    """Fifty concurrent transfers of 10 from one account: no lost updates."""
    owner_id, source = make_user(name="Source")
    _, dest = make_user(name="Dest")

    def transfer_money():
        with session_factory() as session:
            transfer(session, source, dest, 10, None, owner_id)
            return True

    with ThreadPoolExecutor(max_workers=10) as executor:
        futures = [executor.submit(transfer_money) for _ in range(50)]
        results = [future.result() for future in as_completed(futures)]

    assert sum(results) == 50
    assert read_balance(session_factory, source) == Decimal("4500")
    assert read_balance(session_factory, dest) == Decimal("5500")


def test_concurrent_bidirectional_transfers(session_factory, make_user):
    """
    Alice and Bob transfer to each other simultaneously.
    Locks are taken in account-number order, so this cannot deadlock.
    """
    alice_id, alice = make_user(name="Alice")
    bob_id, bob = make_user(name="Bob")
    errors = []

    def send(user_id, from_acc, to_acc):
        for _ in range(10):
            with session_factory() as session:
                try:
                    transfer(session, from_acc, to_acc, 10, None, user_id)
                except Exception as e:
                    errors.append(e)

    thread1 = threading.Thread(target=send, args=(alice_id, alice, bob))
    thread2 = threading.Thread(target=send, args=(bob_id, bob, alice))

    thread1.start()
    thread2.start()

    thread1.join()
    thread2.join()

    assert errors == []
    assert read_balance(session_factory, alice) == Decimal("5000")
    assert read_balance(session_factory, bob) == Decimal("5000")


def test_concurrent_account_creation_respects_cap(session_factory, make_user):
    """Eight threads race to open accounts for a user who already has one."""
    owner_id, _ = make_user()

    def open_account():
        with session_factory() as session:
            try:
                create_account(session, owner_id)
                return "created"
            except AccountLimitExceeded:
                return "limit"

    with ThreadPoolExecutor(max_workers=8) as executor:
        futures = [executor.submit(open_account) for _ in range(8)]
        results = [future.result() for future in as_completed(futures)]

    assert results.count("created") == 3
    assert results.count("limit") == 5
    with session_factory() as session:
        assert len(list_by_owner(session, owner_id)) == 4


# ==================== INVARIANTS ====================

def test_ledger_replay_matches_balances_after_random_traffic(session_factory, make_user):
    """Cached balances always equal opening balance plus replayed ledger."""
    users = [make_user(name=f"User{i}") for i in range(4)]

    def traffic(offset):
        for step in range(15):
            src = (offset + step) % len(users)
            dst = (src + 1 + step % 3) % len(users)
            user_id, from_acc = users[src]
            with session_factory() as session:
                try:
                    transfer(session, from_acc, users[dst][1], Decimal("37.15") * (step % 4 + 1), None, user_id)
                except InsufficientFunds:
                    pass

    with ThreadPoolExecutor(max_workers=4) as executor:
        for future in [executor.submit(traffic, i) for i in range(4)]:
            future.result()

    with session_factory() as session:
        total = Decimal("0")
        for _, account_number in users:
            cached = find_by_account_number(session, account_number).balance
            assert cached == replayed_balance(session, account_number)
            assert cached >= 0
            total += cached
        assert total == Decimal("5000") * len(users)


# ==================== LOCK TIMEOUT TESTS ====================

def test_transfer_gives_up_after_transfer_timeout(tmp_path, monkeypatch):
    """
    While another connection holds the write lock, a transfer waits at most
    TRANSFER_TIMEOUT_MS, then fails as a retryable storage error with
    nothing applied.
    """
    monkeypatch.setattr(settings, "TRANSFER_TIMEOUT_MS", 200)
    engine = build_engine(f"sqlite:///{tmp_path / 'locked.db'}", echo=False)
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    try:
        with factory() as session:
            alice, alice_acc = register_user(session, "Alice", "alice@example.com", "password123")
            _, bob_acc = register_user(session, "Bob", "bob@example.com", "password123")
            alice_id = alice.id
            alice_number = alice_acc.account_number
            bob_number = bob_acc.account_number

        holder = engine.connect()
        holder.begin()
        holder.execute(text("UPDATE accounts SET balance = balance"))
        try:
            with factory() as session:
                started = time.monotonic()
                with pytest.raises(StorageFailure) as excinfo:
                    transfer(session, alice_number, bob_number, 100, None, alice_id)
                elapsed = time.monotonic() - started
        finally:
            holder.rollback()
            holder.close()

        assert excinfo.value.retryable is True
        assert elapsed < 3
        assert read_balance(factory, alice_number) == Decimal("5000")
        assert read_balance(factory, bob_number) == Decimal("5000")
        with factory() as session:
            assert history_for_account(session, alice_number) == []
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


# ==================== STRESS TESTS ====================

@pytest.mark.parametrize("count", [200])
def test_high_volume_sequential_transfers(db, make_user, count):
    """Many sequential transfers keep exact balances and a complete history."""
    owner_id, source = make_user(name="Source")
    _, dest = make_user(name="Dest")

    for i in range(count):
        transfer(db, source, dest, "12.50", f"Transfer {i}", owner_id)

    assert find_by_account_number(db, source).balance == Decimal("2500")
    assert find_by_account_number(db, dest).balance == Decimal("7500")
    entries = history_for_account(db, source, limit=1000)
    assert len(entries) == count
    assert entries[0].description == f"Transfer {count - 1}"
