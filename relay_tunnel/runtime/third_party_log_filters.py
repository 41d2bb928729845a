"""Log noise filters for third-party libraries.

httpx logs every request at INFO. A hanging GET loop issues one request per
inbound chunk, so those lines are hidden unless explicitly enabled.
"""

from __future__ import annotations

import logging

from relay_tunnel.config.logging import SHOW_HTTP_LOGS


def configure() -> None:
    if not SHOW_HTTP_LOGS:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


__all__ = ["configure"]
