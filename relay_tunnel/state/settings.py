"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BackoffSettings:
    initial_ms: int
    growth_factor: int
    jitter_ms: int
    notice_threshold_ms: int
    notice_margin_ms: int
    notice_message: str


@dataclass(frozen=True, slots=True)
class ClientSettings:
    max_chunk_length: int
    connect_timeout_s: float
    read_timeout_s: float
    backoff: BackoffSettings


@dataclass(frozen=True, slots=True)
class ServerSettings:
    host: str
    port: int
    read_max_bytes: int
    read_hold_s: float
    target_connect_timeout_s: float


__all__ = ["BackoffSettings", "ClientSettings", "ServerSettings"]
