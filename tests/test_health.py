"""
tests/test_health.py -- Integration tests for GET /health.

Covers:
  - 200 response with status, version, and components fields
  - components.database reports 'ok' when the engine answers, 'error' when not
  - No authentication required
"""

from __future__ import annotations

from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from api.main import __version__


def test_health_returns_200_with_components(api_client):
    """Health endpoint returns 200 with status, version, and components."""
    client, _token, _ = api_client
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["version"] == __version__
    assert data["components"] == {"app": "ok", "database": "ok"}


def test_health_no_auth_required(api_client):
    """Health endpoint is accessible without any authentication headers."""
    client, _, _ = api_client
    resp = client.get("/health", headers={})
    assert resp.status_code == 200


def test_health_reports_unreachable_database(api_client):
    client, _, _ = api_client
    failure = OperationalError("SELECT 1", {}, Exception("database is locked"))
    with patch.object(client.app.state.engine, "connect", side_effect=failure):
        resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["components"]["database"] == "error"
