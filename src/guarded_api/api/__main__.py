"""
guarded_api.api.__main__

Entrypoint for `python -m guarded_api.api` (also installed as `guarded-api`).
"""

from __future__ import annotations

import uvicorn

from guarded_api.api.app import create_app
from guarded_api.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog owns formatting
        access_log=False,  # RequestContextMiddleware logs `request_completed`
    )


if __name__ == "__main__":
    main()
