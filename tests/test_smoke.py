"""
tests.test_smoke

Minimal smoke tests to validate the service can boot and serve core endpoints.
"""

from __future__ import annotations

import httpx
import pytest

from proforma_backup.api.app import create_app
from proforma_backup.db.connection import ReadyState
from proforma_backup.errors import ConnectionExhausted
from tests.factories import make_settings


@pytest.mark.asyncio
async def test_health_endpoint(tmp_path) -> None:
    app = create_app(settings=make_settings(tmp_path))

    async with app.router.lifespan_context(app):
        assert app.state.connection.state is ReadyState.connected
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.get("/health")
            assert r.status_code == 200
            assert r.json() == {
                "success": True,
                "message": "Server is healthy",
                "mongoConnected": True,
            }
            assert r.headers["x-request-id"]

            r = await client.get("/proformas", headers={"x-request-id": "req-42"})
            assert r.status_code == 200
            assert r.headers["x-request-id"] == "req-42"

    assert app.state.connection.state is ReadyState.disconnected


@pytest.mark.asyncio
async def test_startup_fails_when_store_unreachable(tmp_path) -> None:
    unreachable = f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'backup.db'}"
    app = create_app(settings=make_settings(tmp_path, database_url=unreachable))

    with pytest.raises(ConnectionExhausted) as exc_info:
        async with app.router.lifespan_context(app):
            pass

    assert exc_info.value.attempts == 2
    assert exc_info.value.__cause__ is not None
