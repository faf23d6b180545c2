"""
proforma_backup.db.connection

Store connection lifecycle.

Responsibilities:
- Establish the initial connection with bounded retries and a fixed backoff.
- React to driver-reported disconnects by reconnecting in the background, forever.
- Expose a synchronous readiness check consulted before every storage operation.
"""

from __future__ import annotations

import asyncio
import contextlib
import enum

from sqlalchemy import event, text
from sqlalchemy.engine import ExceptionContext
from sqlalchemy.ext.asyncio import AsyncEngine

from proforma_backup.errors import ConnectionExhausted, StoreUnavailable
from proforma_backup.observability.logging import get_logger

log = get_logger(__name__, component="store")


class ReadyState(enum.IntEnum):
    # Numeric values are reported to clients as `readyState`; treat as stable API contract.
    disconnected = 0
    connected = 1
    connecting = 2
    disconnecting = 3


class ConnectionManager:
    def __init__(
        self,
        engine: AsyncEngine,
        *,
        max_attempts: int = 5,
        retry_interval_seconds: float = 5.0,
    ) -> None:
        self._engine = engine
        self._max_attempts = max_attempts
        self._retry_interval = retry_interval_seconds

        self._state = ReadyState.disconnected
        self._closing = False
        self._loop: asyncio.AbstractEventLoop | None = None
        self._reconnect_task: asyncio.Task[None] | None = None

        # Keep a stable reference so the listener can be removed on close().
        self._listener = self._on_engine_error
        event.listen(engine.sync_engine, "handle_error", self._listener)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def state(self) -> ReadyState:
        return self._state

    @property
    def reconnect_task(self) -> asyncio.Task[None] | None:
        return self._reconnect_task

    def is_ready(self) -> bool:
        return self._state is ReadyState.connected

    def ensure_ready(self) -> None:
        if not self.is_ready():
            log.error("store_not_ready", ready_state=self._state)
            raise StoreUnavailable(int(self._state))

    async def connect(self) -> None:
        """
        One bounded round of connection attempts.
        Raises ConnectionExhausted (chained to the last driver error) when every attempt fails.
        """

        self._loop = asyncio.get_running_loop()
        last_error: Exception | None = None
        for attempt in range(1, self._max_attempts + 1):
            self._state = ReadyState.connecting
            try:
                await self._ping()
            except Exception as e:
                last_error = e
                self._state = ReadyState.disconnected
                log.warning(
                    "store_connect_failed",
                    attempt=attempt,
                    max_attempts=self._max_attempts,
                    error=str(e),
                )
                if attempt < self._max_attempts:
                    await asyncio.sleep(self._retry_interval)
                continue

            self._state = ReadyState.connected
            log.info("store_connected", attempt=attempt)
            return

        raise ConnectionExhausted(self._max_attempts) from last_error

    def on_disconnected(self) -> None:
        """
        Mark the store unavailable and start a background reconnect loop.
        Requests arriving meanwhile fail fast via `ensure_ready`.
        """

        if self._closing:
            return
        self._state = ReadyState.disconnected
        if self._reconnect_task is not None and not self._reconnect_task.done():
            return

        log.warning("store_disconnected")
        loop = self._loop or asyncio.get_running_loop()
        self._reconnect_task = loop.create_task(self._reconnect_forever())

    async def close(self) -> None:
        self._closing = True
        self._state = ReadyState.disconnecting
        task = self._reconnect_task
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if event.contains(self._engine.sync_engine, "handle_error", self._listener):
            event.remove(self._engine.sync_engine, "handle_error", self._listener)
        self._state = ReadyState.disconnected

    async def _ping(self) -> None:
        async with self._engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def _reconnect_forever(self) -> None:
        rounds = 0
        while True:
            rounds += 1
            try:
                await self.connect()
            except ConnectionExhausted as e:
                # Post-startup outages are never fatal; keep trying at the same cadence.
                log.error("store_reconnect_round_failed", rounds=rounds, error=str(e.__cause__))
                await asyncio.sleep(self._retry_interval)
                continue
            log.info("store_reconnected", rounds=rounds)
            return

    def _on_engine_error(self, context: ExceptionContext) -> None:
        # Fires inside the failing statement; only a live connection dropping counts here.
        # Failures during connect() rounds are handled by the retry loop itself.
        if context.is_disconnect and self._state is ReadyState.connected:
            self.on_disconnected()


# --- Module Notes -----------------------------------------------------------
# Readiness is advisory: a connection can still drop mid-operation, in which case the
# statement fails, the request returns 500 and this manager starts reconnecting.
