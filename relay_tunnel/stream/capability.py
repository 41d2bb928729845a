"""The duplex byte stream capability a stream registry depends on."""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from collections.abc import Callable


@runtime_checkable
class DuplexStream(Protocol):
    """Anything that can be opened, written to and closed.

    Inbound bytes are pushed to the data callback handed over at construction;
    the registry never pulls.
    """

    async def open(self, target_host: str, target_port: int, relay_base_url: str) -> bool: ...

    def write(self, data: bytes, on_write: Callable[[], None] | None = None) -> None: ...

    def close(self, reason: BaseException | None = None) -> None: ...


__all__ = ["DuplexStream"]
