"""
proforma_backup.db.repositories.proformas

Repository for `Proforma` entities.

Responsibilities:
- Upsert proformas by their client-assigned id.
- List proformas newest-first for the read endpoint.
- Provide raw counts and a sample row for diagnostics.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from proforma_backup.db.models import Proforma
from proforma_backup.db.repositories._upsert import upsert_by_id


class ProformaRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, proforma_id: int) -> Proforma | None:
        stmt = select(Proforma).where(Proforma.id == proforma_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def upsert(self, proforma_id: int, fields: dict[str, Any]) -> None:
        await upsert_by_id(self._session, Proforma, proforma_id, fields)

    async def list_newest_first(self) -> list[Proforma]:
        # Timestamps are client strings, so this is a lexical sort; NULLs sink to the end.
        # Remaining ties fall back to insertion order, never to the client id.
        stmt = select(Proforma).order_by(
            Proforma.date_created.desc().nulls_last(),
            Proforma.last_modified.desc().nulls_last(),
            Proforma.seq,
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def count(self) -> int:
        stmt = select(func.count()).select_from(Proforma)
        return int((await self._session.execute(stmt)).scalar_one())

    async def first_stored(self) -> Proforma | None:
        stmt = select(Proforma).order_by(Proforma.seq).limit(1)
        return (await self._session.execute(stmt)).scalar_one_or_none()
