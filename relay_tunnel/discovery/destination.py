"""Connection destinations as exchanged with relay discovery."""

from __future__ import annotations

from dataclasses import dataclass

from relay_tunnel.config.relay import DEFAULT_TARGET_PORT


@dataclass(frozen=True, slots=True)
class Destination:
    user: str
    host: str
    proxy: str
    port: int = DEFAULT_TARGET_PORT

    def __str__(self) -> str:
        return f"{self.user}@{self.host}:{self.port}@{self.proxy}"


def parse_destination(text: str) -> Destination:
    """Parse `user@host[:port]@proxy` back into a `Destination`."""
    parts = (text or "").strip().split("@")
    if len(parts) != 3 or not all(parts):
        raise ValueError(f"destination must look like user@host:port@proxy, got {text!r}")
    user, target, proxy = parts

    host, sep, port_raw = target.rpartition(":")
    if not sep:
        return Destination(user=user, host=target, proxy=proxy)
    try:
        port = int(port_raw)
    except ValueError as exc:
        raise ValueError(f"invalid port in destination {text!r}") from exc
    if not host or not 0 < port < 65536:
        raise ValueError(f"invalid host or port in destination {text!r}")
    return Destination(user=user, host=host, proxy=proxy, port=port)


__all__ = ["Destination", "parse_destination"]
