"""Health probes — liveness and readiness with and without a database.

Tests cover:
    - /healthz always 200
    - /healthz/ready 200 when no database configured
    - /healthz/ready 200 with a healthy database, 503 when the check fails
"""

from unittest.mock import AsyncMock

import xcloudflow.infrastructure.database as db_module


async def test_liveness(client):
    res = await client.get("/healthz")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_ready_without_database(client, monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    res = await client.get("/healthz/ready")
    assert res.status_code == 200
    assert res.json()["checks"] == {"database": "not_configured"}


async def test_ready_with_healthy_database(client, patched_db_manager):
    res = await client.get("/healthz/ready")
    assert res.status_code == 200
    assert res.json()["checks"] == {"database": "healthy"}


async def test_not_ready_when_database_down(client, monkeypatch):
    manager = AsyncMock()
    manager.health_check.return_value = False
    monkeypatch.setattr(db_module, "db_manager", manager)
    res = await client.get("/healthz/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "database_unavailable"
