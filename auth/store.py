"""
auth/store.py -- SQLAlchemy Core persistence layer for employee accounts.

Pattern: Repository + Data Mapper (same as reporting/store.py).
AccountStore is the repository; _row_to_account is the mapper.
Route and service code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  UNIQUE(username) is enforced by the schema, not only by the registration
  pre-check. Two concurrent registrations for the same username can both pass
  the pre-check; the second INSERT then fails with IntegrityError, which is
  surfaced as ConstraintViolation.

Failure mapping:
  IntegrityError          -> ConstraintViolation
  any other SQLAlchemyError -> StoreUnavailable
  The driver message is logged, never returned to callers as text.

The Engine is injected. The store does not own its lifetime; api/main.py
disposes it at shutdown.

Layer rule: no imports from api/ or reporting/. Imports from core/ are allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.models import Account
from core.errors import ConstraintViolation, StoreUnavailable

logger = logging.getLogger("staffdesk.auth.store")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_employees = Table(
    "employees",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("employee_name", String(255)),
    Column("username", String(255), nullable=False, unique=True),  # case-sensitive
    Column("password", Text, nullable=False),  # bcrypt hash, never plaintext
    Column("position", String(255)),
    Column("created_at", String(32), nullable=False),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class AccountStore:
    """Repository for Account entities.

    Usage:
        store = AccountStore(engine)
        account_id = store.create_account(Account(username="alice", hashed_password=hash_password("s3cret")))
        account = store.get_by_username("alice")
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        metadata.create_all(self.engine)

    def create_account(self, account: Account) -> int:
        """Insert a new account and return its assigned database ID.

        Raises ConstraintViolation if the username already exists, and
        StoreUnavailable on any other database failure.
        """
        try:
            with self.engine.begin() as conn:
                result = conn.execute(
                    _employees.insert().values(
                        employee_name=account.employee_name,
                        username=account.username,
                        password=account.hashed_password,
                        position=account.position,
                        created_at=_now_iso(),
                    )
                )
                return result.inserted_primary_key[0]
        except IntegrityError as exc:
            raise ConstraintViolation() from exc
        except SQLAlchemyError as exc:
            logger.error("Account insert failed: %s", type(exc).__name__)
            raise StoreUnavailable() from exc

    def get_by_username(self, username: str) -> Account | None:
        """Look up an account by exact username (case-sensitive). Returns None if not found."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(_employees.select().where(_employees.c.username == username)).fetchone()
        except SQLAlchemyError as exc:
            logger.error("Account lookup failed: %s", type(exc).__name__)
            raise StoreUnavailable() from exc
        return _row_to_account(row) if row is not None else None

    def get_by_id(self, account_id: int) -> Account | None:
        """Look up an account by primary key. Returns None if not found."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(_employees.select().where(_employees.c.id == account_id)).fetchone()
        except SQLAlchemyError as exc:
            logger.error("Account lookup failed: %s", type(exc).__name__)
            raise StoreUnavailable() from exc
        return _row_to_account(row) if row is not None else None

    def count_accounts(self) -> int:
        """Return the number of stored accounts."""
        try:
            with self.engine.connect() as conn:
                return conn.execute(select(func.count()).select_from(_employees)).scalar() or 0
        except SQLAlchemyError as exc:
            logger.error("Account count failed: %s", type(exc).__name__)
            raise StoreUnavailable() from exc


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_account(row) -> Account:
    return Account(
        id=row.id,
        username=row.username,
        hashed_password=row.password,
        employee_name=row.employee_name,
        position=row.position,
        created_at=row.created_at,
    )
