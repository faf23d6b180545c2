"""
proforma_backup.api.routers.health

Health endpoint.

Responsibilities:
- Report store readiness (`/health`) without touching stored data.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from proforma_backup.api.deps import require_store_ready

router = APIRouter()


@router.get("/health", dependencies=[Depends(require_store_ready)])
async def health() -> dict[str, Any]:
    # Not-ready is reported by the dependency as a 500 with readyState.
    # `mongoConnected` is kept as the field name existing clients read.
    return {"success": True, "message": "Server is healthy", "mongoConnected": True}
