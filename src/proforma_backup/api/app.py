"""
proforma_backup.api.app

FastAPI app factory for the proforma backup service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/exception handlers.
- Own shared infrastructure (engine, connection manager, session factory) for the
  lifetime of the process.
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from proforma_backup import __version__
from proforma_backup.api.middleware import BodySizeLimitMiddleware
from proforma_backup.api.routers.backup import router as backup_router
from proforma_backup.api.routers.debug import router as debug_router
from proforma_backup.api.routers.health import router as health_router
from proforma_backup.api.routers.proformas import router as proformas_router
from proforma_backup.db.connection import ConnectionManager
from proforma_backup.db.init_db import init_db
from proforma_backup.db.session import create_engine, create_sessionmaker
from proforma_backup.errors import BackupServiceError, ConnectionExhausted
from proforma_backup.observability.logging import configure_logging, get_logger
from proforma_backup.observability.middleware import RequestContextMiddleware
from proforma_backup.settings import Settings

log = get_logger(__name__, component="app")


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(
        service_name=settings.service_name,
        env=settings.env,
        level=settings.log_level,
        json_logs=settings.log_json,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        connection = ConnectionManager(
            engine,
            max_attempts=settings.connect_max_attempts,
            retry_interval_seconds=settings.connect_retry_interval_seconds,
        )
        app.state.engine = engine
        app.state.connection = connection
        app.state.sessionmaker = create_sessionmaker(engine)

        try:
            await connection.connect()
        except ConnectionExhausted as e:
            # Never serve traffic without storage: failing startup terminates the server.
            log.critical("store_connection_exhausted", attempts=e.attempts, error=str(e.__cause__))
            await connection.close()
            await engine.dispose()
            raise

        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
            await init_db(engine)

        try:
            yield
        finally:
            await connection.close()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Proforma Backup Service",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Last added runs first: request context wraps everything, including size rejections.
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    _register_exception_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(backup_router)
    app.include_router(proformas_router)
    if settings.debug_endpoints:
        app.include_router(debug_router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BackupServiceError)
    async def _service_error(_: Request, exc: BackupServiceError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: app composition stays here; business logic stays
# in routers/services.
