"""
dealership_inventory.api.__main__

Entrypoint for running the API via `python -m dealership_inventory.api`
(or the `dealership-api` console script).
"""

from __future__ import annotations

import uvicorn

from dealership_inventory.api.app import create_app
from dealership_inventory.settings import get_settings


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
