"""
auth/passwords.py -- Password hashing and verification (bcrypt).

Security design decisions:
  bcrypt is used directly (no passlib wrapper). Its cost factor makes offline
  brute force expensive, and gensalt() produces a fresh salt on every call
  that is embedded in the output string, so no separate salt column exists
  and two accounts sharing a password get different hashes.

  Cost is fixed at 10 rounds. Changing it only affects new hashes; checkpw
  reads the cost back out of each stored hash.

  bcrypt only looks at the first 72 bytes of input and bcrypt>=5 raises on
  anything longer. password_fits_bcrypt() lets the request model reject such
  input up front instead of truncating it.

These functions own no state and have no side effects beyond their return
values. They are safe to call concurrently from the threadpool.

Layer rule: no imports from api/, core/, or reporting/
"""

from __future__ import annotations

import bcrypt

BCRYPT_ROUNDS = 10
BCRYPT_MAX_BYTES = 72


def password_fits_bcrypt(plain: str) -> bool:
    """Return True if plain encodes to at most 72 UTF-8 bytes."""
    return len(plain.encode("utf-8")) <= BCRYPT_MAX_BYTES


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password."""
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    Never raises: a malformed or foreign hash, or an over-long password,
    simply fails verification.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except Exception:
        return False


# Timing equalization dummy hash.
# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones. Login runs verify_password() against this hash
# when the username does not exist, so response time does not reveal whether
# an account exists.
DUMMY_HASH: str = hash_password("staffdesk_timing_dummy")
