"""Reference relay server configuration (env-resolved constants only)."""

from __future__ import annotations

import os

RELAY_SERVER_HOST = (os.getenv("RELAY_SERVER_HOST") or "127.0.0.1").strip()

_RELAY_SERVER_PORT_RAW = (os.getenv("RELAY_SERVER_PORT") or "").strip()
try:
    RELAY_SERVER_PORT: int = int(_RELAY_SERVER_PORT_RAW) if _RELAY_SERVER_PORT_RAW else 8023
except Exception:
    RELAY_SERVER_PORT = 8023

# 768 raw bytes encode to exactly one 1024-character chunk.
_RELAY_READ_MAX_BYTES_RAW = (os.getenv("RELAY_READ_MAX_BYTES") or "").strip()
try:
    RELAY_READ_MAX_BYTES: int = int(_RELAY_READ_MAX_BYTES_RAW) if _RELAY_READ_MAX_BYTES_RAW else 768
except Exception:
    RELAY_READ_MAX_BYTES = 768
RELAY_READ_MAX_BYTES = max(1, int(RELAY_READ_MAX_BYTES))

# How long a hanging GET is held open before answering with an empty body.
_RELAY_READ_HOLD_S_RAW = (os.getenv("RELAY_READ_HOLD_S") or "").strip()
try:
    RELAY_READ_HOLD_S: float = float(_RELAY_READ_HOLD_S_RAW) if _RELAY_READ_HOLD_S_RAW else 30.0
except Exception:
    RELAY_READ_HOLD_S = 30.0
if RELAY_READ_HOLD_S <= 0:
    RELAY_READ_HOLD_S = 30.0

_RELAY_TARGET_CONNECT_TIMEOUT_S_RAW = (os.getenv("RELAY_TARGET_CONNECT_TIMEOUT_S") or "").strip()
try:
    RELAY_TARGET_CONNECT_TIMEOUT_S: float = (
        float(_RELAY_TARGET_CONNECT_TIMEOUT_S_RAW) if _RELAY_TARGET_CONNECT_TIMEOUT_S_RAW else 10.0
    )
except Exception:
    RELAY_TARGET_CONNECT_TIMEOUT_S = 10.0
if RELAY_TARGET_CONNECT_TIMEOUT_S <= 0:
    RELAY_TARGET_CONNECT_TIMEOUT_S = 10.0

__all__ = [
    "RELAY_READ_HOLD_S",
    "RELAY_READ_MAX_BYTES",
    "RELAY_SERVER_HOST",
    "RELAY_SERVER_PORT",
    "RELAY_TARGET_CONNECT_TIMEOUT_S",
]
