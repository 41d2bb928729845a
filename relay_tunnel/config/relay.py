"""Relay wire protocol configuration (env-resolved constants only)."""

from __future__ import annotations

import os

# Endpoint names appended to the relay base URL.
RELAY_PROXY_PATH = "proxy"
RELAY_READ_PATH = "read"
RELAY_WRITE_PATH = "write"

# Query keys
RELAY_KEY_HOST = "host"
RELAY_KEY_PORT = "port"
RELAY_KEY_SESSION_ID = "sid"
RELAY_KEY_READ_COUNT = "rcnt"
RELAY_KEY_WRITE_COUNT = "wcnt"
RELAY_KEY_DATA = "data"

HTTP_STATUS_OK = 200
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_GONE = 410
HTTP_STATUS_BAD_GATEWAY = 502

DEFAULT_TARGET_PORT = 22

_RELAY_PORT_RAW = (os.getenv("RELAY_PORT") or "").strip()
try:
    RELAY_PORT: int = int(_RELAY_PORT_RAW) if _RELAY_PORT_RAW else 8023
except Exception:
    RELAY_PORT = 8023

RELAY_URL_PATTERN = "http://{host}:{port}/"

# Writes are split so the encoded chunk stays inside GET request limits.
_RELAY_MAX_CHUNK_LENGTH_RAW = (os.getenv("RELAY_MAX_CHUNK_LENGTH") or "").strip()
try:
    RELAY_MAX_CHUNK_LENGTH: int = int(_RELAY_MAX_CHUNK_LENGTH_RAW) if _RELAY_MAX_CHUNK_LENGTH_RAW else 1024
except Exception:
    RELAY_MAX_CHUNK_LENGTH = 1024
if RELAY_MAX_CHUNK_LENGTH <= 0:
    RELAY_MAX_CHUNK_LENGTH = 1024

_RELAY_CONNECT_TIMEOUT_S_RAW = (os.getenv("RELAY_CONNECT_TIMEOUT_S") or "").strip()
try:
    RELAY_CONNECT_TIMEOUT_S: float = float(_RELAY_CONNECT_TIMEOUT_S_RAW) if _RELAY_CONNECT_TIMEOUT_S_RAW else 10.0
except Exception:
    RELAY_CONNECT_TIMEOUT_S = 10.0
if RELAY_CONNECT_TIMEOUT_S <= 0:
    RELAY_CONNECT_TIMEOUT_S = 10.0

# 0 disables the client-side read timeout; hanging GETs are held by the relay.
_RELAY_READ_TIMEOUT_S_RAW = (os.getenv("RELAY_READ_TIMEOUT_S") or "").strip()
try:
    RELAY_READ_TIMEOUT_S: float = float(_RELAY_READ_TIMEOUT_S_RAW) if _RELAY_READ_TIMEOUT_S_RAW else 0.0
except Exception:
    RELAY_READ_TIMEOUT_S = 0.0
RELAY_READ_TIMEOUT_S = max(0.0, RELAY_READ_TIMEOUT_S)

__all__ = [
    "DEFAULT_TARGET_PORT",
    "HTTP_STATUS_BAD_GATEWAY",
    "HTTP_STATUS_BAD_REQUEST",
    "HTTP_STATUS_GONE",
    "HTTP_STATUS_OK",
    "RELAY_CONNECT_TIMEOUT_S",
    "RELAY_KEY_DATA",
    "RELAY_KEY_HOST",
    "RELAY_KEY_PORT",
    "RELAY_KEY_READ_COUNT",
    "RELAY_KEY_SESSION_ID",
    "RELAY_KEY_WRITE_COUNT",
    "RELAY_MAX_CHUNK_LENGTH",
    "RELAY_PORT",
    "RELAY_PROXY_PATH",
    "RELAY_READ_PATH",
    "RELAY_READ_TIMEOUT_S",
    "RELAY_URL_PATTERN",
    "RELAY_WRITE_PATH",
]
