"""Unit tests for auth/store.py -- AccountStore persistence and failure mapping.

Covers:
- create_account assigns an id; get_by_username / get_by_id read it back
- username lookup is exact and case-sensitive
- the UNIQUE constraint rejects a second account with ConstraintViolation
- driver failures surface as StoreUnavailable, not raw SQLAlchemy errors
"""

import pytest
from sqlalchemy import text

from auth.models import Account
from auth.passwords import hash_password
from auth.store import AccountStore
from core.errors import ConstraintViolation, StoreUnavailable


def _account(username: str = "alice") -> Account:
    return Account(
        username=username,
        hashed_password=hash_password("secret1"),
        employee_name="Alice",
        position="eng",
    )


def test_create_and_fetch_by_username(account_store: AccountStore) -> None:
    account_id = account_store.create_account(_account())
    found = account_store.get_by_username("alice")
    assert found is not None
    assert found.id == account_id
    assert found.employee_name == "Alice"
    assert found.position == "eng"
    assert found.hashed_password.startswith("$2b$")
    assert found.created_at


def test_fetch_by_id(account_store: AccountStore) -> None:
    account_id = account_store.create_account(_account())
    assert account_store.get_by_id(account_id).username == "alice"
    assert account_store.get_by_id(account_id + 1000) is None


def test_unknown_username_returns_none(account_store: AccountStore) -> None:
    assert account_store.get_by_username("nobody") is None


def test_username_lookup_is_case_sensitive(account_store: AccountStore) -> None:
    account_store.create_account(_account("alice"))
    assert account_store.get_by_username("Alice") is None
    assert account_store.get_by_username("ALICE") is None


def test_usernames_differing_in_case_are_distinct_accounts(account_store: AccountStore) -> None:
    first = account_store.create_account(_account("alice"))
    second = account_store.create_account(_account("Alice"))
    assert first != second
    assert account_store.count_accounts() == 2


def test_duplicate_username_raises_constraint_violation(account_store: AccountStore) -> None:
    account_store.create_account(_account())
    with pytest.raises(ConstraintViolation):
        account_store.create_account(_account())
    assert account_store.count_accounts() == 1


def test_ids_are_assigned_by_store(account_store: AccountStore) -> None:
    first = account_store.create_account(_account("a"))
    second = account_store.create_account(_account("b"))
    assert first != second


def test_lookup_failure_raises_store_unavailable(account_store: AccountStore) -> None:
    with account_store.engine.begin() as conn:
        conn.execute(text("DROP TABLE employees"))
    with pytest.raises(StoreUnavailable):
        account_store.get_by_username("alice")
    with pytest.raises(StoreUnavailable):
        account_store.get_by_id(1)


def test_insert_failure_raises_store_unavailable(account_store: AccountStore) -> None:
    with account_store.engine.begin() as conn:
        conn.execute(text("DROP TABLE employees"))
    with pytest.raises(StoreUnavailable):
        account_store.create_account(_account())


def test_count_failure_raises_store_unavailable(account_store: AccountStore) -> None:
    with account_store.engine.begin() as conn:
        conn.execute(text("DROP TABLE employees"))
    with pytest.raises(StoreUnavailable):
        account_store.count_accounts()
