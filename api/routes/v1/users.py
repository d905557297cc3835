"""
api/routes/v1/users.py -- Read-only customer reporting endpoints.

Routes:
  GET /users            -- paginated customers with current plan (?page=&limit=)
  GET /users/{user_id}  -- one customer with plan, server, invoice, payment
                           method, support ticket, and usage data

Both are projections over the reporting tables. No mutations here.
"""

from fastapi import APIRouter, Depends, Query, Request

from api.models import CustomerDetail, CustomerRow
from auth.dependencies import require_identity
from core.errors import NotFound
from reporting.store import ReportingStore

# Auth policy:
# - GET /users, GET /users/{user_id}: require auth -- customer and billing
#   data is internal. Router-level dependency enforces it for every route
#   registered here, so handlers do not repeat it.
router = APIRouter(dependencies=[Depends(require_identity)])


@router.get("/users", response_model=list[CustomerRow])
def list_users(
    request: Request,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> list[CustomerRow]:
    """Return one page of customers ordered by user_id."""
    reporting: ReportingStore = request.app.state.reporting
    return [CustomerRow(**row) for row in reporting.list_customers(page=page, limit=limit)]


@router.get("/users/{user_id}", response_model=CustomerDetail)
def get_user(request: Request, user_id: int) -> CustomerDetail:
    """Return full customer detail. Related groups are null when absent."""
    reporting: ReportingStore = request.app.state.reporting
    detail = reporting.get_customer_detail(user_id)
    if detail is None:
        raise NotFound("User not found")
    return CustomerDetail(**detail)
