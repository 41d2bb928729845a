"""Relay host resolution.

Finding which relay serves a destination is someone else's job (a cookie
server redirect, a config file, a flag). The stream only needs the resulting
base URL, so resolution is injected through `RelayResolver`.
"""

from __future__ import annotations

from relay_tunnel.config.relay import RELAY_PORT, RELAY_URL_PATTERN

from .base import RelayResolver
from .destination import Destination


def relay_base_url(relay_host: str, port: int | None = None) -> str:
    host = (relay_host or "").strip()
    if not host:
        raise ValueError("relay host is required")
    if host.startswith(("http://", "https://")):
        return host if host.endswith("/") else f"{host}/"
    return RELAY_URL_PATTERN.format(host=host, port=RELAY_PORT if port is None else port)


class StaticRelayResolver:
    """Resolve every destination to one already-known relay host."""

    def __init__(self, relay_host: str, *, port: int | None = None) -> None:
        self._base_url = relay_base_url(relay_host, port)

    def resolve(self, destination: Destination) -> str:
        return self._base_url


__all__ = ["RelayResolver", "StaticRelayResolver", "relay_base_url"]
