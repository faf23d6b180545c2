"""
proforma_backup.services.projection

Read-side assembly of proformas with their items.

Responsibilities:
- Load proformas newest-first and the items that belong to them.
- Emit only business-visible fields, camelCased for the client.
- Provide diagnostic counts for operational inspection.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession

from proforma_backup.db.models import Item, Proforma
from proforma_backup.db.repositories.items import ItemRepo
from proforma_backup.db.repositories.proformas import ProformaRepo
from proforma_backup.errors import ProjectionFailed
from proforma_backup.observability.logging import get_logger
from proforma_backup.schemas import ITEM_PROJECTION_FIELDS, PROFORMA_PROJECTION_FIELDS

log = get_logger(__name__, component="projection")


@dataclass(frozen=True, slots=True)
class Projection:
    proformas: list[dict[str, Any]]
    latest_modified: str | None

    @property
    def count(self) -> int:
        return len(self.proformas)


def _project(row: Proforma | Item, fields: tuple[str, ...]) -> dict[str, Any]:
    return {to_camel(name): getattr(row, name) for name in fields}


class ProjectionBuilder:
    def __init__(self, session: AsyncSession) -> None:
        self._proformas = ProformaRepo(session)
        self._items = ItemRepo(session)

    async def build(self) -> Projection:
        try:
            proformas = await self._proformas.list_newest_first()
            items = await self._items.list_for_proformas([p.id for p in proformas])
        except Exception as e:
            log.error("projection_failed", error=str(e))
            raise ProjectionFailed(e) from e

        # Group once, keeping storage order within each proforma.
        by_proforma: dict[int, list[dict[str, Any]]] = {}
        for item in items:
            by_proforma.setdefault(item.proforma_id, []).append(
                _project(item, ITEM_PROJECTION_FIELDS)
            )

        projected = []
        for p in proformas:
            view = _project(p, PROFORMA_PROJECTION_FIELDS)
            view["items"] = by_proforma.get(p.id, [])
            projected.append(view)

        return Projection(
            proformas=projected,
            latest_modified=proformas[0].last_modified if proformas else None,
        )

    async def inspect(self) -> dict[str, Any]:
        try:
            db_count = await self._proformas.count()
            api_count = len(await self._proformas.list_newest_first())
            sample = await self._proformas.first_stored()
        except Exception as e:
            raise ProjectionFailed(e) from e
        return {
            "dbCount": db_count,
            "apiCount": api_count,
            "discrepancy": db_count - api_count,
            "sampleRecord": _sample_record(sample),
        }


def _sample_record(row: Proforma | None) -> dict[str, Any] | None:
    if row is None:
        return None
    record: dict[str, Any] = {}
    for column in Proforma.__table__.columns:
        value = getattr(row, column.key)
        record[to_camel(column.key)] = value.isoformat() if hasattr(value, "isoformat") else value
    return record
