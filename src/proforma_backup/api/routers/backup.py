"""
proforma_backup.api.routers.backup

Snapshot ingestion endpoint.

Responsibilities:
- Accept a full client snapshot (`POST /backup`) and hand it to the reconciliation engine.
- Parse the body only after the readiness gate, so an outage is reported as such.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from proforma_backup.api.deps import db_session, require_store_ready
from proforma_backup.errors import InvalidSnapshot
from proforma_backup.observability.logging import get_logger
from proforma_backup.schemas import BackupData, BackupRequest
from proforma_backup.services.reconciliation import ReconciliationEngine

router = APIRouter(tags=["backup"])
log = get_logger(__name__, component="http")


async def _read_snapshot(request: Request) -> BackupData | None:
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        body = BackupRequest.model_validate_json(raw)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_input=False)
        log.warning("invalid_backup_payload", error_count=len(errors))
        raise InvalidSnapshot("Invalid backup data", errors=jsonable_encoder(errors)) from e
    return body.data


@router.post("/backup", dependencies=[Depends(require_store_ready)])
async def save_backup(
    request: Request,
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    # Read after the readiness gate; declared body parameters are parsed before dependencies.
    data = await _read_snapshot(request)
    if data is None:
        raise InvalidSnapshot("Backup data is required")

    # InvalidSnapshot / ReconciliationFailed are rendered by the app's exception handlers.
    await ReconciliationEngine(session).apply(data.proformas, data.items)
    return {"success": True, "message": "Backup saved successfully"}
