"""
tests.test_connection

Connection lifecycle: bounded startup retries, background reconnect and readiness.
"""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine

from proforma_backup.db.connection import ConnectionManager, ReadyState
from proforma_backup.db.session import create_engine
from proforma_backup.errors import ConnectionExhausted, StoreUnavailable
from tests.factories import make_settings


class FlakyConnectionManager(ConnectionManager):
    """Fails the first `failures` pings, then succeeds."""

    def __init__(self, *, failures: int, max_attempts: int = 5) -> None:
        super().__init__(
            create_async_engine("sqlite+aiosqlite://"),
            max_attempts=max_attempts,
            retry_interval_seconds=0,
        )
        self.failures = failures
        self.pings = 0

    async def _ping(self) -> None:
        self.pings += 1
        if self.pings <= self.failures:
            raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))


@pytest.mark.asyncio
async def test_connect_retries_until_success() -> None:
    manager = FlakyConnectionManager(failures=2)

    await manager.connect()

    assert manager.pings == 3
    assert manager.state is ReadyState.connected
    assert manager.is_ready()
    await manager.close()


@pytest.mark.asyncio
async def test_connect_gives_up_after_max_attempts() -> None:
    manager = FlakyConnectionManager(failures=100, max_attempts=5)

    with pytest.raises(ConnectionExhausted) as exc_info:
        await manager.connect()

    assert manager.pings == 5
    assert exc_info.value.attempts == 5
    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert manager.state is ReadyState.disconnected
    assert not manager.is_ready()


@pytest.mark.asyncio
async def test_connect_waits_between_failed_attempts(monkeypatch) -> None:
    sleeps: list[float] = []

    async def fake_sleep(delay: float) -> None:
        sleeps.append(delay)

    manager = FlakyConnectionManager(failures=100, max_attempts=5)
    manager._retry_interval = 5.0
    monkeypatch.setattr(asyncio, "sleep", fake_sleep)

    with pytest.raises(ConnectionExhausted):
        await manager.connect()

    # No wait after the final attempt.
    assert sleeps == [5.0, 5.0, 5.0, 5.0]


@pytest.mark.asyncio
async def test_ensure_ready_fails_fast_before_connect() -> None:
    manager = FlakyConnectionManager(failures=0)

    with pytest.raises(StoreUnavailable) as exc_info:
        manager.ensure_ready()

    assert exc_info.value.ready_state == int(ReadyState.disconnected)
    assert exc_info.value.to_payload() == {
        "success": False,
        "message": "Database connection not ready",
        "readyState": 0,
        "mongoConnected": False,
    }


@pytest.mark.asyncio
async def test_disconnect_reconnects_in_background_across_rounds() -> None:
    manager = FlakyConnectionManager(failures=0, max_attempts=3)
    await manager.connect()

    # The outage outlasts two full rounds of attempts; the loop must keep going.
    manager.failures = manager.pings + 7
    manager.on_disconnected()

    assert not manager.is_ready()
    task = manager.reconnect_task
    assert task is not None
    await asyncio.wait_for(task, timeout=5)

    assert manager.is_ready()
    assert manager.pings == 1 + 8
    await manager.close()


@pytest.mark.asyncio
async def test_repeated_disconnect_signals_share_one_reconnect_loop() -> None:
    manager = FlakyConnectionManager(failures=0)
    await manager.connect()
    manager.failures = 10**6

    manager.on_disconnected()
    first = manager.reconnect_task
    manager.on_disconnected()

    assert manager.reconnect_task is first
    await manager.close()
    assert first.done()
    assert manager.state is ReadyState.disconnected


@pytest.mark.asyncio
async def test_engine_disconnect_event_triggers_reconnect() -> None:
    manager = FlakyConnectionManager(failures=0)
    await manager.connect()

    manager._on_engine_error(SimpleNamespace(is_disconnect=False))
    assert manager.reconnect_task is None

    manager._on_engine_error(SimpleNamespace(is_disconnect=True))
    assert manager.reconnect_task is not None
    await asyncio.wait_for(manager.reconnect_task, timeout=5)
    assert manager.is_ready()
    await manager.close()


@pytest.mark.asyncio
async def test_real_sqlite_store_connects(tmp_path) -> None:
    engine = create_engine(make_settings(tmp_path))
    manager = ConnectionManager(engine, max_attempts=1, retry_interval_seconds=0)

    await manager.connect()

    assert manager.is_ready()
    await manager.close()
    await engine.dispose()


@pytest.mark.asyncio
async def test_unreachable_sqlite_store_exhausts(tmp_path) -> None:
    url = f"sqlite+aiosqlite:///{tmp_path / 'no' / 'such' / 'dir.db'}"
    engine = create_engine(make_settings(tmp_path, database_url=url))
    manager = ConnectionManager(engine, max_attempts=2, retry_interval_seconds=0)

    with pytest.raises(ConnectionExhausted):
        await manager.connect()

    await manager.close()
    await engine.dispose()
