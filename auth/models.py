"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and routes do
the work; these dataclasses own the domain shape.

Layer rule: no imports from api/, core/, or reporting/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Account:
    """An employee account that can log in to StaffDesk.

    hashed_password always holds a bcrypt hash from the moment the record is
    created. The plaintext never reaches this dataclass.

    id is None before the record is written to the database.
    """

    username: str
    hashed_password: str
    employee_name: str | None = None
    position: str | None = None
    id: int | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class Identity:
    """The claims a verified session token carries into a request.

    Attached to request.state.identity by the authorization gate.
    """

    id: int
    username: str
