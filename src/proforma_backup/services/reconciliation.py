"""
proforma_backup.services.reconciliation

Snapshot reconciliation service (transaction owner for backups).

Responsibilities:
- Upsert every proforma of a snapshot.
- Replace the full item set of every proforma in the snapshot.
- Wrap any store failure into ReconciliationFailed.

Each phase commits on its own; a failure leaves earlier phases applied. Every phase is
idempotent, so resubmitting the same snapshot converges to the same end state.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from proforma_backup.db.repositories.items import ItemRepo
from proforma_backup.db.repositories.proformas import ProformaRepo
from proforma_backup.errors import InvalidSnapshot, ReconciliationFailed
from proforma_backup.observability.logging import get_logger, log_context
from proforma_backup.schemas import ItemRecord, ProformaRecord

log = get_logger(__name__, component="reconciliation")


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    proformas_upserted: int
    items_deleted: int
    items_upserted: int


class ReconciliationEngine:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._proformas = ProformaRepo(session)
        self._items = ItemRepo(session)

    async def apply(
        self,
        proformas: Sequence[ProformaRecord] | None,
        items: Sequence[ItemRecord] | None,
    ) -> ReconciliationResult:
        if proformas is None or items is None:
            raise InvalidSnapshot("Backup data is required")

        with log_context(snapshot_proformas=len(proformas), snapshot_items=len(items)):
            phase = "upsert_proformas"
            try:
                await self._upsert_proformas(proformas)
                await self._session.commit()

                # The delete must be committed before any item is written: an item upserted
                # first would be wiped by a delete targeting the same proforma id.
                phase = "clear_items"
                deleted = await self._clear_items({p.id for p in proformas})
                await self._session.commit()

                phase = "upsert_items"
                await self._upsert_items(items)
                await self._session.commit()
            except Exception as e:
                await self._session.rollback()
                log.error("reconciliation_failed", phase=phase, error=str(e))
                raise ReconciliationFailed(phase, e) from e

            log.info("reconciliation_applied", items_deleted=deleted)

        return ReconciliationResult(
            proformas_upserted=len(proformas),
            items_deleted=deleted,
            items_upserted=len(items),
        )

    async def _upsert_proformas(self, proformas: Sequence[ProformaRecord]) -> None:
        for proforma in proformas:
            await self._proformas.upsert(proforma.id, proforma.fields_to_store())

    async def _clear_items(self, proforma_ids: set[int]) -> int:
        return await self._items.delete_for_proformas(proforma_ids)

    async def _upsert_items(self, items: Sequence[ItemRecord]) -> None:
        # Items pointing at a proforma outside this snapshot are stored as-is.
        for item in items:
            await self._items.upsert(item.id, item.fields_to_store())


# --- Module Notes -----------------------------------------------------------
# Concurrent backups touching the same proforma race per statement (last write wins);
# no cross-request locking is attempted.
