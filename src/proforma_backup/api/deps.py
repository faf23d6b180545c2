"""
proforma_backup.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for the connection manager and DB sessions.
- Gate storage-touching routes on store readiness.
- Encapsulate app.state access patterns.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from proforma_backup.db.connection import ConnectionManager


def connection_from_app(request: Request) -> ConnectionManager:
    # Created by the lifespan handler in `proforma_backup.api.app.create_app`.
    return request.app.state.connection  # type: ignore[attr-defined]


def require_store_ready(
    connection: ConnectionManager = Depends(connection_from_app),
) -> None:
    # Fails fast with StoreUnavailable; requests are never queued during an outage.
    connection.ensure_ready()


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session
