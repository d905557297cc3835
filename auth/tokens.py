"""
auth/tokens.py -- Stateless session tokens (JWT, python-jose, HS256).

Security design decisions:
  Tokens are signed with the process-wide SECRET_KEY from core.config. The key
  is never a literal in source. api/main.py builds one TokenService in the
  lifespan startup and stores it on app.state; it is read-only afterwards and
  shared by every request.

  Payload: {"id", "username", "iat", "exp"}. exp = iat + token_expire_seconds
  (one hour by default). There is no server-side session table -- a token is
  valid exactly when its signature verifies and exp is in the future.

  verify() collapses every failure (malformed, bad signature, expired, missing
  claim) into a single InvalidToken so callers cannot leak which check failed.

Layer rule: no imports from api/ or reporting/. Imports from core/ are allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from jose.utils import base64url_decode, base64url_encode

from auth.models import Identity
from core.errors import InvalidToken

logger = logging.getLogger("staffdesk.auth")

ALGORITHM = "HS256"

_DECODE_OPTIONS = {"require_exp": True, "require_iat": True}


def _is_canonical_jws(token: str) -> bool:
    """Return True if token has three segments that each re-encode to themselves.

    base64url decoding ignores the unused low bits of the final character, so
    several spellings of one segment decode to the same bytes. Only the
    spelling that encode() would produce is accepted.
    """
    segments = token.split(".")
    if len(segments) != 3:
        return False
    try:
        return all(base64url_encode(base64url_decode(s.encode("ascii"))) == s.encode("ascii") for s in segments)
    except ValueError:
        return False


class TokenService:
    """Issues and verifies signed session tokens.

    Usage:
        tokens = TokenService(settings.secret_key, settings.token_expire_seconds)
        token = tokens.issue(account.id, account.username)
        identity = tokens.verify(token)   # raises InvalidToken
    """

    def __init__(self, secret_key: str, expire_seconds: int = 3600) -> None:
        if not secret_key:
            raise ValueError("TokenService requires a signing secret.")
        self._secret_key = secret_key
        self.expire_seconds = expire_seconds

    def issue(self, account_id: int, username: str, issued_at: datetime | None = None) -> str:
        """Encode a signed JWT for the given account.

        Args:
            account_id: Numeric account ID stored in the DB.
            username:   Account username.
            issued_at:  Issue time; defaults to now (UTC). The expiry is
                        always computed relative to this value.
        """
        iat = issued_at or datetime.now(timezone.utc)
        payload = {
            "id": account_id,
            "username": username,
            "iat": iat,
            "exp": iat + timedelta(seconds=self.expire_seconds),
        }
        return jwt.encode(payload, self._secret_key, algorithm=ALGORITHM)

    def verify(self, token: str) -> Identity:
        """Decode and verify a JWT. Returns the Identity it carries.

        Raises InvalidToken on any failure. The underlying reason is logged
        at DEBUG without the token itself.
        """
        if not _is_canonical_jws(token):
            logger.debug("Token rejected: non-canonical encoding")
            raise InvalidToken()

        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[ALGORITHM], options=_DECODE_OPTIONS)
        except JWTError as exc:
            logger.debug("Token rejected: %s", type(exc).__name__)
            raise InvalidToken() from None

        account_id = payload.get("id")
        username = payload.get("username")
        if not isinstance(account_id, int) or isinstance(account_id, bool) or not isinstance(username, str):
            logger.debug("Token rejected: missing identity claims")
            raise InvalidToken()
        return Identity(id=account_id, username=username)
