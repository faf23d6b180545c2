"""
proforma_backup.api.routers.debug

Operational inspection endpoint (not part of the client contract).

Responsibilities:
- Compare the raw proforma row count with what the listing query returns.
- Show one stored record verbatim.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from proforma_backup.api.deps import db_session, require_store_ready
from proforma_backup.services.projection import ProjectionBuilder

router = APIRouter(tags=["debug"])


@router.get("/debug-proformas", dependencies=[Depends(require_store_ready)])
async def debug_proformas(session: AsyncSession = Depends(db_session)) -> dict[str, Any]:
    return await ProjectionBuilder(session).inspect()


# --- Module Notes -----------------------------------------------------------
# Registered only when `Settings.debug_endpoints` is true.
