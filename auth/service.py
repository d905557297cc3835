"""
auth/service.py -- Registration and login flows.

These two functions are the only places that combine the store with the
password engine. Routes call them and never inline get_by_username() +
verify_password() -- that would re-introduce the timing leak that
authenticate_account() closes.

Registration:
  get_by_username (early exit) -> hash_password -> create_account.
  The pre-check is an optimization only. The UNIQUE constraint is what
  actually guarantees one account per username; a ConstraintViolation from a
  concurrent registration is reported as the same ValidationConflict.

Login:
  get_by_username -> verify_password. bcrypt always runs, against DUMMY_HASH
  when the username is unknown, so unknown-user and wrong-password take the
  same time and produce the same result.

Layer rule: no imports from api/ or reporting/. Imports from core/ are allowed.
"""

from __future__ import annotations

import logging

from auth.models import Account
from auth.passwords import DUMMY_HASH, hash_password, verify_password
from auth.store import AccountStore
from core.errors import ConstraintViolation, ValidationConflict

logger = logging.getLogger("staffdesk.auth")


def register_account(
    store: AccountStore,
    username: str,
    password: str,
    employee_name: str | None = None,
    position: str | None = None,
) -> int:
    """Create a new account and return its ID.

    Raises ValidationConflict if the username is taken. StoreUnavailable from
    the store propagates unchanged.
    """
    if store.get_by_username(username) is not None:
        logger.info("Registration rejected: username %r already exists", username)
        raise ValidationConflict()

    account = Account(
        username=username,
        hashed_password=hash_password(password),
        employee_name=employee_name,
        position=position,
    )
    try:
        account_id = store.create_account(account)
    except ConstraintViolation as exc:
        # Lost the race against a concurrent registration.
        logger.info("Registration rejected: username %r taken concurrently", username)
        raise ValidationConflict() from exc

    logger.info("Registered account %d (%s)", account_id, username)
    return account_id


def authenticate_account(store: AccountStore, username: str, password: str) -> Account | None:
    """Return the Account when username and password match, otherwise None.

    Unknown usernames and wrong passwords both return None after running
    bcrypt exactly once.
    """
    account = store.get_by_username(username)
    if account is None:
        verify_password(password, DUMMY_HASH)
        return None
    if not verify_password(password, account.hashed_password):
        return None
    return account
