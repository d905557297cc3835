"""
core/errors.py -- Exception taxonomy shared by auth/ and reporting/.

Every exception here is intentionally discriminated: api/main.py maps each
class to one HTTP status and one error code. Anything not listed here is an
unexpected fault and becomes a generic 500.

  ValidationConflict     -> 400 username_taken
  AuthenticationFailure  -> 401 bad_credentials
  AuthorizationFailure   -> 401 access_denied
  InvalidToken           -> 403 invalid_token
  NotFound               -> 404 not_found
  StoreUnavailable       -> 500 internal_error

ConstraintViolation is raised by the store and never reaches HTTP directly;
auth/service.py converts it to ValidationConflict.

Messages are fixed strings. No exception carries a password, a token, or a
driver error message in its public message.

Layer rule: core/ is the kernel. No imports from api/, auth/, or reporting/.
"""

from __future__ import annotations


class AccountError(Exception):
    """Base class for all StaffDesk domain errors."""

    status_code = 500
    code = "internal_error"
    message = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationConflict(AccountError):
    status_code = 400
    code = "username_taken"
    message = "Username already exists."


class AuthenticationFailure(AccountError):
    """Wrong username or wrong password. The two cases are not distinguished."""

    status_code = 401
    code = "bad_credentials"
    message = "Invalid username or password."


class AuthorizationFailure(AccountError):
    """No bearer token was presented."""

    status_code = 401
    code = "access_denied"
    message = "Access denied"


class InvalidToken(AccountError):
    """Token was malformed, badly signed, expired, or missing claims."""

    status_code = 403
    code = "invalid_token"
    message = "Invalid token"


class NotFound(AccountError):
    status_code = 404
    code = "not_found"
    message = "Resource not found."


class ConstraintViolation(AccountError):
    """The datastore rejected a write that would break a uniqueness rule."""

    code = "constraint_violation"
    message = "Constraint violation."


class StoreUnavailable(AccountError):
    """The datastore could not be reached or failed mid-operation."""
