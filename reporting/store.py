"""
reporting/store.py -- SQLAlchemy Core persistence for the hosting-customer reporting tables.

Uses SQLAlchemy Core (not ORM) so the dataclasses in reporting/models.py stay
the domain representation, and the read projections come back as plain dicts
shaped exactly like the HTTP responses.

Pattern: Repository. ReportingStore owns every query against the reporting
tables; route handlers never touch SQL directly.

Tables:
  users, plans, user_plans, servers, user_servers, invoices,
  payment_methods, support_tickets, server_usage

Read projections (the only operations the HTTP surface exposes):
  list_customers(page, limit)  -- users LEFT JOIN user_plans LEFT JOIN plans
  get_customer_detail(user_id) -- users LEFT JOIN everything, first row, nested

Left-join semantics are preserved: a customer with no related rows still
comes back, and each related group (plan, server, ...) is None when the join
found nothing.

Security: all queries use bound parameters. No f-strings in SQL.

The Engine is injected and owned by the app lifespan.

Usage:
    store = ReportingStore(engine)
    uid = store.create_customer(Customer(full_name="Ada", email="ada@example.com"))
    rows = store.list_customers(page=1, limit=10)
    detail = store.get_customer_detail(uid)
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Column,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.errors import ConstraintViolation, StoreUnavailable
from reporting.models import Customer, Invoice, Plan, Server, SupportTicket, UsageSample

logger = logging.getLogger("staffdesk.reporting")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_users = Table(
    "users",
    metadata,
    Column("user_id", Integer, primary_key=True, autoincrement=True),
    Column("full_name", String(255), nullable=False),
    Column("email", String(255), nullable=False),
    Column("phone", String(50)),
    Column("company", String(255)),
    Column("created_at", String(32), nullable=False),
)

_plans = Table(
    "plans",
    metadata,
    Column("plan_id", Integer, primary_key=True, autoincrement=True),
    Column("plan_name", String(100), nullable=False),
    Column("cpu_cores", Integer, nullable=False),
    Column("ram_gb", Integer, nullable=False),
    Column("storage_gb", Integer, nullable=False),
    Column("bandwidth_gb", Integer, nullable=False),
    Column("price_monthly", Float, nullable=False),
)

_user_plans = Table(
    "user_plans",
    metadata,
    Column("user_plan_id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.user_id"), nullable=False),
    Column("plan_id", Integer, ForeignKey("plans.plan_id"), nullable=False),
    Column("start_date", String(10), nullable=False),  # YYYY-MM-DD
    Column("expiry_date", String(10)),  # YYYY-MM-DD
    Column("auto_renew", Integer, nullable=False, server_default="0"),  # boolean stored as 0/1
)

_servers = Table(
    "servers",
    metadata,
    Column("server_id", Integer, primary_key=True, autoincrement=True),
    Column("server_name", String(255), nullable=False),
    Column("ip_address", String(45)),
    Column("location", String(100)),
    Column("status", String(30), nullable=False, server_default="active"),
)

_user_servers = Table(
    "user_servers",
    metadata,
    Column("user_server_id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.user_id"), nullable=False),
    Column("server_id", Integer, ForeignKey("servers.server_id"), nullable=False),
)

_invoices = Table(
    "invoices",
    metadata,
    Column("invoice_id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.user_id"), nullable=False),
    Column("amount", Float, nullable=False),
    Column("issue_date", String(10), nullable=False),
    Column("due_date", String(10), nullable=False),
    Column("status", String(30), nullable=False, server_default="unpaid"),
)

_payment_methods = Table(
    "payment_methods",
    metadata,
    Column("payment_method_id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.user_id"), nullable=False),
    Column("method_type", String(30), nullable=False),  # "card" | "paypal" | "bank_transfer"
    Column("details", Text),  # masked display string, e.g. "visa **** 4242"
)

_support_tickets = Table(
    "support_tickets",
    metadata,
    Column("ticket_id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.user_id"), nullable=False),
    Column("subject", String(255), nullable=False),
    Column("description", Text),
    Column("status", String(30), nullable=False, server_default="open"),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

_server_usage = Table(
    "server_usage",
    metadata,
    Column("usage_id", Integer, primary_key=True, autoincrement=True),
    Column("user_server_id", Integer, ForeignKey("user_servers.user_server_id"), nullable=False),
    Column("cpu_usage_percent", Float, nullable=False),
    Column("ram_usage_percent", Float, nullable=False),
    Column("storage_usage_gb", Float, nullable=False),
    Column("bandwidth_usage_gb", Float, nullable=False),
    Column("timestamp", String(32), nullable=False),
)

# Nested groups in the customer detail projection. The first column of each
# group is its key: when it is NULL the LEFT JOIN matched nothing and the
# whole group is reported as None.
_DETAIL_GROUPS: dict[str, list] = {
    "plan": [
        _user_plans.c.user_plan_id,
        _user_plans.c.start_date,
        _user_plans.c.expiry_date,
        _user_plans.c.auto_renew,
        _plans.c.plan_id,
        _plans.c.plan_name,
        _plans.c.cpu_cores,
        _plans.c.ram_gb,
        _plans.c.storage_gb,
        _plans.c.bandwidth_gb,
        _plans.c.price_monthly,
    ],
    "server": [
        _servers.c.server_id,
        _servers.c.server_name,
        _servers.c.ip_address,
        _servers.c.location,
        _servers.c.status,
    ],
    "invoice": [
        _invoices.c.invoice_id,
        _invoices.c.amount,
        _invoices.c.issue_date,
        _invoices.c.due_date,
        _invoices.c.status,
    ],
    "payment_method": [
        _payment_methods.c.payment_method_id,
        _payment_methods.c.method_type,
        _payment_methods.c.details,
    ],
    "ticket": [
        _support_tickets.c.ticket_id,
        _support_tickets.c.subject,
        _support_tickets.c.description,
        _support_tickets.c.status,
        _support_tickets.c.created_at,
        _support_tickets.c.updated_at,
    ],
    "usage": [
        _server_usage.c.usage_id,
        _server_usage.c.cpu_usage_percent,
        _server_usage.c.ram_usage_percent,
        _server_usage.c.storage_usage_gb,
        _server_usage.c.bandwidth_usage_gb,
        _server_usage.c.timestamp,
    ],
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ReportingStore:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Writes (seeding and back-office import; not exposed over HTTP)
    # ------------------------------------------------------------------

    def _insert(self, table: Table, **values) -> int:
        """Insert one row and return its primary key.

        Raises ConstraintViolation when a foreign key or NOT NULL rule rejects
        the row, and StoreUnavailable on any other database failure.
        """
        try:
            with self.engine.begin() as conn:
                result = conn.execute(table.insert().values(**values))
                return result.inserted_primary_key[0]
        except IntegrityError as exc:
            raise ConstraintViolation() from exc
        except SQLAlchemyError as exc:
            logger.error("Insert into %s failed: %s", table.name, type(exc).__name__)
            raise StoreUnavailable() from exc

    def create_customer(self, customer: Customer) -> int:
        """Insert a customer and return its user_id."""
        return self._insert(
            _users,
            full_name=customer.full_name,
            email=customer.email,
            phone=customer.phone,
            company=customer.company,
            created_at=customer.created_at or _now_iso(),
        )

    def create_plan(self, plan: Plan) -> int:
        return self._insert(
            _plans,
            plan_name=plan.plan_name,
            cpu_cores=plan.cpu_cores,
            ram_gb=plan.ram_gb,
            storage_gb=plan.storage_gb,
            bandwidth_gb=plan.bandwidth_gb,
            price_monthly=plan.price_monthly,
        )

    def subscribe(
        self,
        user_id: int,
        plan_id: int,
        start_date: str,
        expiry_date: Optional[str] = None,
        auto_renew: bool = False,
    ) -> int:
        """Attach a plan to a customer. Returns the user_plan_id."""
        return self._insert(
            _user_plans,
            user_id=user_id,
            plan_id=plan_id,
            start_date=start_date,
            expiry_date=expiry_date,
            auto_renew=1 if auto_renew else 0,
        )

    def create_server(self, server: Server) -> int:
        return self._insert(
            _servers,
            server_name=server.server_name,
            ip_address=server.ip_address,
            location=server.location,
            status=server.status,
        )

    def assign_server(self, user_id: int, server_id: int) -> int:
        """Link a server to a customer. Returns the user_server_id."""
        return self._insert(_user_servers, user_id=user_id, server_id=server_id)

    def create_invoice(self, invoice: Invoice) -> int:
        return self._insert(
            _invoices,
            user_id=invoice.user_id,
            amount=invoice.amount,
            issue_date=invoice.issue_date,
            due_date=invoice.due_date,
            status=invoice.status,
        )

    def add_payment_method(self, user_id: int, method_type: str, details: Optional[str] = None) -> int:
        return self._insert(_payment_methods, user_id=user_id, method_type=method_type, details=details)

    def open_ticket(self, ticket: SupportTicket) -> int:
        now = _now_iso()
        return self._insert(
            _support_tickets,
            user_id=ticket.user_id,
            subject=ticket.subject,
            description=ticket.description,
            status=ticket.status,
            created_at=now,
            updated_at=now,
        )

    def record_usage(self, sample: UsageSample) -> int:
        return self._insert(
            _server_usage,
            user_server_id=sample.user_server_id,
            cpu_usage_percent=sample.cpu_usage_percent,
            ram_usage_percent=sample.ram_usage_percent,
            storage_usage_gb=sample.storage_usage_gb,
            bandwidth_usage_gb=sample.bandwidth_usage_gb,
            timestamp=sample.timestamp or _now_iso(),
        )

    # ------------------------------------------------------------------
    # Read projections
    # ------------------------------------------------------------------

    def list_customers(self, page: int = 1, limit: int = 10) -> list[dict]:
        """Return one page of customers with their plan name and expiry.

        Ordered by user_id. A customer with several plans appears once per
        plan; a customer with none appears once with plan_name/expiry_date
        set to None.
        """
        offset = (page - 1) * limit
        stmt = (
            select(_users, _user_plans.c.expiry_date, _plans.c.plan_name)
            .select_from(
                _users.outerjoin(_user_plans, _users.c.user_id == _user_plans.c.user_id).outerjoin(
                    _plans, _user_plans.c.plan_id == _plans.c.plan_id
                )
            )
            .order_by(_users.c.user_id, _user_plans.c.user_plan_id)
            .limit(limit)
            .offset(offset)
        )
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(stmt).mappings().fetchall()
        except SQLAlchemyError as exc:
            logger.error("Customer list query failed: %s", type(exc).__name__)
            raise StoreUnavailable() from exc
        return [dict(r) for r in rows]

    def get_customer_detail(self, user_id: int) -> Optional[dict]:
        """Return one customer with the first related row of each joined table.

        Returns None if the customer does not exist.
        """
        columns = [*_users.c]
        for group, cols in _DETAIL_GROUPS.items():
            columns.extend(c.label(f"{group}__{c.name}") for c in cols)

        joined = (
            _users.outerjoin(_user_plans, _users.c.user_id == _user_plans.c.user_id)
            .outerjoin(_plans, _user_plans.c.plan_id == _plans.c.plan_id)
            .outerjoin(_user_servers, _users.c.user_id == _user_servers.c.user_id)
            .outerjoin(_servers, _user_servers.c.server_id == _servers.c.server_id)
            .outerjoin(_invoices, _users.c.user_id == _invoices.c.user_id)
            .outerjoin(_payment_methods, _users.c.user_id == _payment_methods.c.user_id)
            .outerjoin(_support_tickets, _users.c.user_id == _support_tickets.c.user_id)
            .outerjoin(_server_usage, _user_servers.c.user_server_id == _server_usage.c.user_server_id)
        )
        stmt = (
            select(*columns)
            .select_from(joined)
            .where(_users.c.user_id == user_id)
            .order_by(
                _user_plans.c.user_plan_id,
                _user_servers.c.user_server_id,
                _invoices.c.invoice_id,
                _payment_methods.c.payment_method_id,
                _support_tickets.c.ticket_id,
                _server_usage.c.usage_id,
            )
            .limit(1)
        )
        try:
            with self.engine.connect() as conn:
                row = conn.execute(stmt).mappings().fetchone()
        except SQLAlchemyError as exc:
            logger.error("Customer detail query failed: %s", type(exc).__name__)
            raise StoreUnavailable() from exc
        return _row_to_detail(row) if row is not None else None


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_detail(row) -> dict:
    detail = {c.name: row[c.name] for c in _users.c}
    for group, cols in _DETAIL_GROUPS.items():
        values = {c.name: row[f"{group}__{c.name}"] for c in cols}
        if values[cols[0].name] is None:
            detail[group] = None
            continue
        if group == "plan":
            values["auto_renew"] = bool(values["auto_renew"])
        detail[group] = values
    return detail
