"""Relay resolver interface."""

from __future__ import annotations

from typing import Protocol

from .destination import Destination


class RelayResolver(Protocol):
    """Map a destination to the base URL of the relay that serves it."""

    def resolve(self, destination: Destination) -> str: ...


__all__ = ["RelayResolver"]
