"""
proforma_backup.api.__main__

Entrypoint for running the FastAPI application via `python -m proforma_backup.api`.

Responsibilities:
- Load settings.
- Create the app.
- Start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import uvicorn

from proforma_backup.api.app import create_app
from proforma_backup.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    # A failed startup (store unreachable after all attempts) makes uvicorn exit non-zero.
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
