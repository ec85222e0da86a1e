"""
spinup.api.__main__

Entrypoint for running the service via `python -m spinup.api` (or `spinup`).

Responsibilities:
- Load settings once.
- Create the app (which loads keys and builds the provisioning context).
- Start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import uvicorn

from spinup.api.app import create_app
from spinup.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
