"""
auth/dependencies.py -- FastAPI Depends() gate for bearer-token authentication.

The gate reads "Authorization: Bearer <token>" and walks this state machine:

  no Authorization header            -> 401 access_denied
  header present, no token after it  -> 401 access_denied
  token present, verify fails        -> 403 invalid_token
  token verifies                     -> request.state.identity = Identity, proceed

Rejection short-circuits the pipeline before the route handler runs. Token
failures are never retried. The token is verified with the TokenService the
lifespan placed on app.state; the gate never touches the datastore.

Routes declare their requirement explicitly, either per route:
    @router.get("/me")
    def me(identity: Identity = Depends(require_identity)): ...
or for a whole router:
    router = APIRouter(dependencies=[Depends(require_identity)])

Layer rule: may import fastapi (it is part of the DI system) but not api/
or reporting/.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.models import Identity
from auth.tokens import TokenService
from core.errors import AuthorizationFailure, InvalidToken


def extract_bearer_token(request: Request) -> str:
    """Return the raw bearer token from the Authorization header.

    Raises AuthorizationFailure when the header is missing, uses another
    scheme, or has nothing after the scheme.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise AuthorizationFailure()
    scheme, _, token = auth_header.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthorizationFailure()
    return token


def require_identity(request: Request) -> Identity:
    """Require a valid bearer token. Attaches and returns the caller's Identity.

    Raises HTTP 401 when no token is presented and HTTP 403 when the token
    does not verify. The 403 body is identical for every failure reason.
    """
    try:
        token = extract_bearer_token(request)
    except AuthorizationFailure as exc:
        raise HTTPException(
            status_code=401,
            detail={"code": exc.code, "message": exc.message},
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    token_service: TokenService = request.app.state.token_service
    try:
        identity = token_service.verify(token)
    except InvalidToken as exc:
        raise HTTPException(
            status_code=403,
            detail={"code": exc.code, "message": exc.message},
        ) from None

    request.state.identity = identity
    return identity
