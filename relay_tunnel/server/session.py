"""Relay-side state of one tunnelled TCP connection."""

from __future__ import annotations

import asyncio
import logging
import contextlib

from relay_tunnel.errors import CounterMismatchError
from relay_tunnel.config.relay import RELAY_READ_PATH, RELAY_WRITE_PATH
from relay_tunnel.stream.codec import decode_bytes, encode_bytes, approx_decoded_length

logger = logging.getLogger(__name__)


class RelaySession:
    """Bridges counted, web-safe base64 GET traffic to a TCP stream.

    Counters advance with the same approximation the client uses, so a
    client retry is recognised instead of being applied twice: a write whose
    counter is behind was already applied, and a read that repeats the
    previous counter gets the previous chunk again.
    """

    def __init__(
        self,
        session_id: str,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        *,
        read_max_bytes: int,
    ) -> None:
        self.session_id = session_id
        self._reader = reader
        self._writer = writer
        self._read_max_bytes = max(1, int(read_max_bytes))
        self._read_count = 0
        self._write_count = 0
        self._last_chunk = ""
        self._last_read_count: int | None = None
        self._read_lock = asyncio.Lock()
        self._write_lock = asyncio.Lock()
        self._eof = False

    @property
    def read_count(self) -> int:
        return self._read_count

    @property
    def write_count(self) -> int:
        return self._write_count

    async def read(self, read_count: int, hold_s: float) -> str | None:
        """Return the next encoded chunk.

        An empty string means nothing arrived within *hold_s*; None means the
        target closed its side and the session is finished.
        """
        async with self._read_lock:
            if read_count == self._last_read_count and read_count != self._read_count:
                return self._last_chunk
            if read_count != self._read_count:
                raise CounterMismatchError(
                    operation=RELAY_READ_PATH,
                    expected=self._read_count,
                    received=read_count,
                )
            if self._eof:
                return None

            try:
                data = await asyncio.wait_for(self._reader.read(self._read_max_bytes), timeout=hold_s)
            except TimeoutError:
                return ""
            if not data:
                self._eof = True
                return None

            chunk = encode_bytes(data)
            self._last_read_count = self._read_count
            self._last_chunk = chunk
            self._read_count += approx_decoded_length(len(chunk))
            return chunk

    async def write(self, write_count: int, chunk: str) -> bool:
        """Write *chunk* to the target. Returns False for an already-applied retry."""
        async with self._write_lock:
            if write_count < self._write_count:
                logger.debug("session %s: duplicate write at %d", self.session_id, write_count)
                return False
            if write_count > self._write_count:
                raise CounterMismatchError(
                    operation=RELAY_WRITE_PATH,
                    expected=self._write_count,
                    received=write_count,
                )

            self._writer.write(decode_bytes(chunk))
            await self._writer.drain()
            self._write_count += approx_decoded_length(len(chunk))
            return True

    async def close(self) -> None:
        self._writer.close()
        with contextlib.suppress(Exception):
            await self._writer.wait_closed()


__all__ = ["RelaySession"]
