"""Load runtime settings.

Configuration values are resolved from the environment in
`relay_tunnel/config/*` and exposed here as structured dataclasses for the
client and the reference relay server.
"""

from __future__ import annotations

from relay_tunnel.state.settings import BackoffSettings, ClientSettings, ServerSettings
from relay_tunnel.config.relay import (
    RELAY_READ_TIMEOUT_S,
    RELAY_MAX_CHUNK_LENGTH,
    RELAY_CONNECT_TIMEOUT_S,
)
from relay_tunnel.config.server import (
    RELAY_READ_HOLD_S,
    RELAY_SERVER_HOST,
    RELAY_SERVER_PORT,
    RELAY_READ_MAX_BYTES,
    RELAY_TARGET_CONNECT_TIMEOUT_S,
)
from relay_tunnel.config.backoff import (
    BACKOFF_JITTER_MS,
    BACKOFF_INITIAL_MS,
    RELAY_RETRY_MESSAGE,
    BACKOFF_GROWTH_FACTOR,
    BACKOFF_NOTICE_MARGIN_MS,
    BACKOFF_NOTICE_THRESHOLD_MS,
)


def load_backoff_settings() -> BackoffSettings:
    return BackoffSettings(
        initial_ms=BACKOFF_INITIAL_MS,
        growth_factor=BACKOFF_GROWTH_FACTOR,
        jitter_ms=BACKOFF_JITTER_MS,
        notice_threshold_ms=BACKOFF_NOTICE_THRESHOLD_MS,
        notice_margin_ms=BACKOFF_NOTICE_MARGIN_MS,
        notice_message=RELAY_RETRY_MESSAGE,
    )


def load_client_settings() -> ClientSettings:
    return ClientSettings(
        max_chunk_length=RELAY_MAX_CHUNK_LENGTH,
        connect_timeout_s=RELAY_CONNECT_TIMEOUT_S,
        read_timeout_s=RELAY_READ_TIMEOUT_S,
        backoff=load_backoff_settings(),
    )


def load_server_settings() -> ServerSettings:
    return ServerSettings(
        host=RELAY_SERVER_HOST,
        port=RELAY_SERVER_PORT,
        read_max_bytes=RELAY_READ_MAX_BYTES,
        read_hold_s=RELAY_READ_HOLD_S,
        target_connect_timeout_s=RELAY_TARGET_CONNECT_TIMEOUT_S,
    )


__all__ = ["load_backoff_settings", "load_client_settings", "load_server_settings"]
