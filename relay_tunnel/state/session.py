"""Relay session identity (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Session:
    relay_base_url: str
    session_id: str
    target_host: str
    target_port: int


__all__ = ["Session"]
