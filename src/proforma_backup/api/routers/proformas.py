"""
proforma_backup.api.routers.proformas

Read endpoint for backed-up proformas.

Responsibilities:
- Serve every proforma with its items, newest first (`GET /proformas`).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from proforma_backup.api.deps import db_session, require_store_ready
from proforma_backup.services.projection import ProjectionBuilder

router = APIRouter(tags=["proformas"])


@router.get("/proformas", dependencies=[Depends(require_store_ready)])
async def list_proformas(session: AsyncSession = Depends(db_session)) -> dict[str, Any]:
    projection = await ProjectionBuilder(session).build()
    payload: dict[str, Any] = {
        "success": True,
        "proformas": projection.proformas,
        "count": projection.count,
    }
    # Omitted entirely (not null) when nothing has been backed up yet.
    if projection.latest_modified is not None:
        payload["latestModified"] = projection.latest_modified
    return payload
