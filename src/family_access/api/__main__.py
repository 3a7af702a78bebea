"""
family_access.api.__main__

Entrypoint for running the FastAPI application via `python -m family_access.api`.

Responsibilities:
- Load settings.
- Create the app.
- Start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import uvicorn

from family_access.api.app import create_app
from family_access.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
        # Client address must be the socket peer unless a trusted proxy is configured.
        proxy_headers=False,
    )


if __name__ == "__main__":
    main()
