"""
microtodo.api.__main__

Entrypoint: `python -m microtodo.api` (set MICROTODO_SERVICE=identity|tasks).

Responsibilities:
- Load settings.
- Create the selected service's app.
- Start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import uvicorn

from microtodo.api.app import create_app
from microtodo.settings import get_settings


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
