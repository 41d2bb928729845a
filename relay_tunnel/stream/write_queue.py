"""Outbound pipeline: ordered chunk queue drained by one request at a time.

The relay accounts for written bytes with an incrementing counter, so a
chunk is only dropped from the head once the relay acknowledged it and the
next chunk is never sent while another write is still in flight.
"""

from __future__ import annotations

import asyncio
import logging
import collections

from relay_tunnel.state.session import Session
from relay_tunnel.config.relay import RELAY_WRITE_PATH, RELAY_MAX_CHUNK_LENGTH
from relay_tunnel.errors import SessionGoneError, StreamStateError, TransientRelayError

from .read_loop import TerminalFn
from .transport import RelayTransport
from .codec import encode_bytes, approx_decoded_length
from .backoff import SleepFn, NoticeFn, BackoffController, wait_before_retry

logger = logging.getLogger(__name__)


def split_chunks(encoded: str, max_chunk_length: int) -> list[str]:
    return [encoded[i : i + max_chunk_length] for i in range(0, len(encoded), max_chunk_length)]


class WriteQueue:
    def __init__(
        self,
        *,
        transport: RelayTransport,
        on_terminal: TerminalFn,
        max_chunk_length: int | None = None,
        notify: NoticeFn | None = None,
        backoff: BackoffController | None = None,
        sleep_fn: SleepFn | None = None,
    ) -> None:
        self._transport = transport
        self._on_terminal = on_terminal
        self._max_chunk_length = max(1, int(max_chunk_length or RELAY_MAX_CHUNK_LENGTH))
        self._notify = notify
        self._backoff = backoff or BackoffController()
        self._sleep_fn = sleep_fn
        self._chunks: collections.deque[str] = collections.deque()
        self._write_count = 0
        self._session: Session | None = None
        self._stopped = False
        self._task: asyncio.Task | None = None

    @property
    def write_count(self) -> int:
        return self._write_count

    @property
    def backoff_ms(self) -> int:
        return self._backoff.backoff_ms

    @property
    def pending(self) -> tuple[str, ...]:
        return tuple(self._chunks)

    @property
    def task(self) -> asyncio.Task | None:
        return self._task

    def attach(self, session: Session) -> None:
        self._session = session

    def enqueue(self, data: bytes) -> int:
        """Queue *data* for the relay and return the number of chunks added."""
        if self._stopped or self._session is None:
            raise StreamStateError(operation="write", state="closed" if self._stopped else "opening")
        if not data:
            return 0

        need_service = not self._chunks
        chunks = split_chunks(encode_bytes(data), self._max_chunk_length)
        self._chunks.extend(chunks)
        if need_service:
            self.drain()
        return len(chunks)

    def drain(self) -> asyncio.Task | None:
        if self._stopped or self._session is None or not self._chunks:
            return None
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._drain(self._session), name=f"relay-write-{self._session.session_id}")
        return self._task

    async def join(self) -> None:
        """Wait until every queued chunk was acknowledged or the queue stopped."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    def stop(self) -> asyncio.Task | None:
        """Discard pending chunks and cancel the in-flight write or retry timer."""
        self._stopped = True
        self._chunks.clear()
        task = self._task
        if task is not None and task is not asyncio.current_task():
            task.cancel()
        return task

    async def _drain(self, session: Session) -> None:
        while self._chunks and not self._stopped:
            chunk = self._chunks[0]
            try:
                await self._transport.write(session, self._write_count, chunk)
            except TransientRelayError:
                await wait_before_retry(
                    self._backoff,
                    operation=RELAY_WRITE_PATH,
                    notify=self._notify,
                    sleep_fn=self._sleep_fn,
                )
                continue
            except SessionGoneError as exc:
                logger.info("relay dropped session %s on write", session.session_id)
                self._chunks.clear()
                self._on_terminal(exc)
                return

            if self._stopped:
                return
            self._chunks.popleft()
            self._write_count += approx_decoded_length(len(chunk))
            if self._backoff.on_success():
                logger.info("write recovered")


__all__ = ["WriteQueue", "split_chunks"]
