"""
proforma_backup.db.repositories._upsert

Single-record upsert keyed by a client-assigned unique id.

Responsibilities:
- Emit one atomic INSERT ... ON CONFLICT DO UPDATE on dialects that support it.
- Fall back to select-then-update-or-insert elsewhere.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from proforma_backup.db.base import Base

_ON_CONFLICT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


async def upsert_by_id(
    session: AsyncSession, model: type[Base], record_id: int, fields: dict[str, Any]
) -> None:
    insert = _ON_CONFLICT_INSERTS.get(session.get_bind().dialect.name)
    if insert is not None:
        stmt = insert(model).values(id=record_id, **fields)
        if fields:
            # ON CONFLICT updates skip Column.onupdate, so stamp updated_at explicitly.
            stmt = stmt.on_conflict_do_update(
                index_elements=["id"], set_={**fields, "updated_at": datetime.utcnow()}
            )
        else:
            stmt = stmt.on_conflict_do_nothing(index_elements=["id"])
        await session.execute(stmt)
        return

    query = select(model).where(model.id == record_id)  # type: ignore[attr-defined]
    existing = (await session.execute(query.with_for_update())).scalar_one_or_none()
    if existing is not None:
        for key, value in fields.items():
            setattr(existing, key, value)
    else:
        session.add(model(id=record_id, **fields))
    await session.flush()
