"""
proforma_backup.errors

Domain-specific exceptions for the backup service.

Responsibilities:
- Name every failure mode the service distinguishes.
- Carry the HTTP status and JSON payload each one maps to at the request boundary.
"""

from __future__ import annotations

from typing import Any

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class BackupServiceError(Exception):
    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR

    def to_payload(self) -> dict[str, Any]:
        return {"success": False, "error": str(self)}


class ConnectionExhausted(BackupServiceError):
    """
    Raised when every connection attempt in a round failed.
    Fatal at startup; logged and retried when raised by the background reconnect loop.
    """

    def __init__(self, attempts: int) -> None:
        super().__init__(f"store connection failed after {attempts} attempts")
        self.attempts = attempts


class StoreUnavailable(BackupServiceError):
    def __init__(self, ready_state: int) -> None:
        super().__init__("Database connection not ready")
        self.ready_state = ready_state

    def to_payload(self) -> dict[str, Any]:
        return {
            "success": False,
            "message": str(self),
            "readyState": self.ready_state,
            "mongoConnected": False,
        }


class InvalidSnapshot(BackupServiceError):
    status_code = HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Backup data is required", errors: list[Any] | None = None):
        super().__init__(message)
        self.errors = errors

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": False, "message": str(self)}
        if self.errors is not None:
            payload["errors"] = self.errors
        return payload


class ReconciliationFailed(BackupServiceError):
    """
    Wraps the underlying store error of a failed snapshot application.
    Phases committed before the failure are not rolled back.
    """

    def __init__(self, phase: str, cause: BaseException) -> None:
        super().__init__(str(cause))
        self.phase = phase
        self.cause = cause

    def to_payload(self) -> dict[str, Any]:
        return {"success": False, "message": "Failed to save backup", "error": str(self)}


class ProjectionFailed(BackupServiceError):
    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause))
        self.cause = cause


# --- Module Notes -----------------------------------------------------------
# Exception handlers registered in `api.app.create_app` turn these into JSON responses;
# nothing here depends on FastAPI itself.
