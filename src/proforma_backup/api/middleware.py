"""
proforma_backup.api.middleware

Request plumbing middleware.

Responsibilities:
- Reject request bodies larger than the configured limit before they are parsed.
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_413_REQUEST_ENTITY_TOO_LARGE
from starlette.types import ASGIApp

from proforma_backup.observability.logging import get_logger

log = get_logger(__name__, component="http")


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, *, max_body_bytes: int) -> None:
        super().__init__(app)
        self._max_body_bytes = max_body_bytes

    async def dispatch(self, request: Request, call_next) -> Response:
        declared = request.headers.get("content-length")
        if declared is not None:
            try:
                size = int(declared)
            except ValueError:
                return JSONResponse(
                    status_code=HTTP_400_BAD_REQUEST,
                    content={"success": False, "message": "Invalid Content-Length"},
                )
            if size > self._max_body_bytes:
                log.warning("request_body_too_large", size=size, limit=self._max_body_bytes)
                return JSONResponse(
                    status_code=HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    content={"success": False, "message": "Payload too large"},
                )
        return await call_next(request)


# --- Module Notes -----------------------------------------------------------
# Only the declared Content-Length is checked; chunked uploads without one pass through.
