"""Run the reference relay under uvicorn."""

from __future__ import annotations

import uvicorn

from relay_tunnel.config.logging import LOG_LEVEL
from relay_tunnel.runtime.logging import configure_logging
from relay_tunnel.runtime.settings import load_server_settings

from .app import create_app


def run() -> None:
    configure_logging()
    settings = load_server_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=LOG_LEVEL.lower(),
    )


__all__ = ["run"]
