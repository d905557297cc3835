"""
api/routes/v1/auth.py -- Registration, login, and identity endpoints.

Routes:
  POST /register  -- create an employee account; 201
  POST /login     -- password login; returns a bearer token
  GET  /me        -- identity attached by the gate (requires auth)

Security:
  authenticate_account() provides timing equalization -- use it, never inline.
  Wrong username and wrong password produce the identical 401 body.
  Cache-Control: no-store on login responses (they carry a token).
  Neither the password nor the token is ever logged.

Handlers that hash or verify passwords are plain def so FastAPI runs them in
its threadpool and bcrypt never blocks the event loop.

Domain errors (ValidationConflict, StoreUnavailable) propagate to the
handlers registered in api/main.py.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import (
    AccountOut,
    ErrorDetail,
    ErrorResponse,
    IdentityResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
)
from auth.dependencies import require_identity
from auth.models import Identity
from auth.service import authenticate_account, register_account
from auth.store import AccountStore
from auth.tokens import TokenService
from core.errors import AuthenticationFailure

logger = logging.getLogger("staffdesk.api.auth")

# Auth policy:
# - POST /register: public -- account creation is open
# - POST /login:    public -- login endpoint must be unauthenticated
# - GET  /me:       requires auth (require_identity)
router = APIRouter()


@router.post("/register", response_model=MessageResponse, status_code=201)
def register(request: Request, body: RegisterRequest) -> MessageResponse:
    """Create a new employee account.

    Returns 400 username_taken if the username exists, including when a
    concurrent registration wins the race to the UNIQUE constraint.
    """
    store: AccountStore = request.app.state.account_store
    register_account(
        store,
        username=body.username,
        password=body.password,
        employee_name=body.employee_name,
        position=body.position,
    )
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with username and password; return a signed session token.

    Returns the same generic error for wrong username and wrong password
    ("bad_credentials") to avoid leaking username existence information.
    """
    store: AccountStore = request.app.state.account_store
    token_service: TokenService = request.app.state.token_service

    account = authenticate_account(store, body.username, body.password)
    if account is None:
        logger.info("Login failed for %r", body.username)
        failure = AuthenticationFailure()
        resp = JSONResponse(
            status_code=401,
            content=ErrorResponse(error=ErrorDetail(code=failure.code, message=failure.message)).model_dump(),
        )
        resp.headers["Cache-Control"] = "no-store"
        return resp

    token = token_service.issue(account.id, account.username)
    logger.info("Login succeeded for account %d", account.id)
    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(
            token=token,
            expires_in=token_service.expire_seconds,
            user=AccountOut(
                id=account.id,
                employee_name=account.employee_name,
                username=account.username,
                position=account.position,
            ),
        ).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.get("/me", response_model=IdentityResponse)
def me(identity: Identity = Depends(require_identity)) -> IdentityResponse:
    """Return the identity carried by the caller's bearer token."""
    return IdentityResponse(id=identity.id, username=identity.username)
