"""
reporting/models.py -- Domain dataclasses for the hosting-customer reporting tables.

These are pure data containers with zero logic. The store writes them and
reads the joined projections back as plain dicts, because the HTTP layer
returns those projections verbatim.

id fields are None before the record is written to the database.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Customer:
    """A hosting customer (row in the users table)."""

    full_name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    user_id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert


@dataclass
class Plan:
    plan_name: str
    cpu_cores: int
    ram_gb: int
    storage_gb: int
    bandwidth_gb: int
    price_monthly: float
    plan_id: Optional[int] = None


@dataclass
class Server:
    server_name: str
    ip_address: Optional[str] = None
    location: Optional[str] = None
    status: str = "active"  # "active" | "stopped" | "maintenance"
    server_id: Optional[int] = None


@dataclass
class Invoice:
    user_id: int
    amount: float
    issue_date: str  # YYYY-MM-DD
    due_date: str  # YYYY-MM-DD
    status: str = "unpaid"  # "unpaid" | "paid" | "overdue"
    invoice_id: Optional[int] = None


@dataclass
class SupportTicket:
    user_id: int
    subject: str
    description: Optional[str] = None
    status: str = "open"  # "open" | "in_progress" | "closed"
    ticket_id: Optional[int] = None


@dataclass
class UsageSample:
    """One resource-usage measurement for a customer's server assignment."""

    user_server_id: int
    cpu_usage_percent: float
    ram_usage_percent: float
    storage_usage_gb: float
    bandwidth_usage_gb: float
    usage_id: Optional[int] = None
    timestamp: str = ""  # ISO 8601, set by store when empty
