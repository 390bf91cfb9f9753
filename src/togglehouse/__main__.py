"""Run the toggle server: ``python -m togglehouse``."""
from __future__ import annotations

import uvicorn

from togglehouse.adapters.fastapi import create_app
from togglehouse.config import DotenvSettingsLoader, ServerSettings


def main() -> None:
    settings = DotenvSettingsLoader().load(ServerSettings)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
