"""
proforma_backup.db.repositories.items

Repository for `Item` entities.

Responsibilities:
- Upsert items by their client-assigned id.
- Bulk-delete and bulk-load items by owning proforma id.
"""

from __future__ import annotations

from collections.abc import Collection
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from proforma_backup.db.models import Item
from proforma_backup.db.repositories._upsert import upsert_by_id


class ItemRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, item_id: int) -> Item | None:
        stmt = select(Item).where(Item.id == item_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def upsert(self, item_id: int, fields: dict[str, Any]) -> None:
        await upsert_by_id(self._session, Item, item_id, fields)

    async def delete_for_proformas(self, proforma_ids: Collection[int]) -> int:
        if not proforma_ids:
            return 0
        stmt = delete(Item).where(Item.proforma_id.in_(proforma_ids))
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def list_for_proformas(self, proforma_ids: Collection[int]) -> list[Item]:
        if not proforma_ids:
            return []
        # Insertion order; callers must not rely on any other ordering.
        stmt = (
            select(Item)
            .where(Item.proforma_id.in_(proforma_ids))
            .order_by(Item.seq)
        )
        return list((await self._session.execute(stmt)).scalars().all())


# --- Module Notes -----------------------------------------------------------
# Large snapshots produce large IN lists; SQLAlchemy renders them as expanding bind
# parameters, which both SQLite and Postgres handle for realistic backup sizes.
