"""
API request and response models for StaffDesk REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
reporting/models.py, which own the internal domain representation. Route
handlers map between the two.

Passwords appear only in request models and are never part of a response.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.passwords import password_fits_bcrypt

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /register.

    username is case-sensitive and stored exactly as submitted.
    """

    employee_name: Optional[str] = Field(default=None, max_length=255)
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=255)
    position: Optional[str] = Field(default=None, max_length=255)

    @field_validator("password")
    @classmethod
    def password_within_bcrypt_limit(cls, value: str) -> str:
        """bcrypt reads at most 72 bytes; reject rather than truncate."""
        if not password_fits_bcrypt(value):
            raise ValueError("password must be at most 72 bytes when UTF-8 encoded")
        return value


class LoginRequest(BaseModel):
    """Request body for POST /login."""

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=255)


# ---------------------------------------------------------------------------
# Response models -- auth
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class AccountOut(BaseModel):
    """Public view of an Account. Never includes the password hash."""

    model_config = ConfigDict(frozen=True)

    id: int
    employee_name: Optional[str]
    username: str
    position: Optional[str]


class LoginResponse(BaseModel):
    """Response body for a successful POST /login."""

    model_config = ConfigDict(frozen=True)

    message: str = "Login successful"
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: AccountOut


class IdentityResponse(BaseModel):
    """Response for GET /me -- the identity the gate attached to the request."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str


# ---------------------------------------------------------------------------
# Response models -- reporting
# ---------------------------------------------------------------------------


class CustomerRow(BaseModel):
    """One row in the GET /users list: customer columns plus current plan."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    full_name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    created_at: str
    expiry_date: Optional[str] = None
    plan_name: Optional[str] = None


class PlanInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_plan_id: int
    start_date: str
    expiry_date: Optional[str]
    auto_renew: bool
    plan_id: int
    plan_name: str
    cpu_cores: int
    ram_gb: int
    storage_gb: int
    bandwidth_gb: int
    price_monthly: float


class ServerInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    server_id: int
    server_name: str
    ip_address: Optional[str]
    location: Optional[str]
    status: str


class InvoiceInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    invoice_id: int
    amount: float
    issue_date: str
    due_date: str
    status: str


class PaymentMethodInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    payment_method_id: int
    method_type: str
    details: Optional[str]


class TicketInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    ticket_id: int
    subject: str
    description: Optional[str]
    status: str
    created_at: str
    updated_at: str


class UsageInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    usage_id: int
    cpu_usage_percent: float
    ram_usage_percent: float
    storage_usage_gb: float
    bandwidth_usage_gb: float
    timestamp: str


class CustomerDetail(BaseModel):
    """Response for GET /users/{user_id}.

    Each nested group is null when the customer has no related row of that kind.
    """

    model_config = ConfigDict(frozen=True)

    user_id: int
    full_name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    created_at: str
    plan: Optional[PlanInfo] = None
    server: Optional[ServerInfo] = None
    invoice: Optional[InvoiceInfo] = None
    payment_method: Optional[PaymentMethodInfo] = None
    ticket: Optional[TicketInfo] = None
    usage: Optional[UsageInfo] = None


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
