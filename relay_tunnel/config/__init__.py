"""Configuration module exports (env-resolved constants only)."""

from .relay import (
    RELAY_PORT,
    RELAY_MAX_CHUNK_LENGTH,
)

__all__ = [
    "RELAY_MAX_CHUNK_LENGTH",
    "RELAY_PORT",
]
