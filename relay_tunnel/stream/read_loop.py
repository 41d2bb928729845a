"""Inbound pipeline: one hanging GET at a time, re-issued until closed."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from relay_tunnel.state.session import Session
from relay_tunnel.config.relay import RELAY_READ_PATH
from relay_tunnel.errors import SessionGoneError, TransientRelayError, MalformedEncodingError

from .transport import RelayTransport
from .codec import decode_bytes, approx_decoded_length
from .backoff import SleepFn, NoticeFn, BackoffController, wait_before_retry

logger = logging.getLogger(__name__)

DataFn = Callable[[bytes], None]
TerminalFn = Callable[[BaseException], None]


class ReadLoop:
    def __init__(
        self,
        *,
        transport: RelayTransport,
        on_data: DataFn,
        on_terminal: TerminalFn,
        notify: NoticeFn | None = None,
        backoff: BackoffController | None = None,
        sleep_fn: SleepFn | None = None,
    ) -> None:
        self._transport = transport
        self._on_data = on_data
        self._on_terminal = on_terminal
        self._notify = notify
        self._backoff = backoff or BackoffController()
        self._sleep_fn = sleep_fn
        self._read_count = 0
        self._stopped = False
        self._task: asyncio.Task | None = None

    @property
    def read_count(self) -> int:
        return self._read_count

    @property
    def backoff_ms(self) -> int:
        return self._backoff.backoff_ms

    @property
    def task(self) -> asyncio.Task | None:
        return self._task

    def start(self, session: Session) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self._run(session), name=f"relay-read-{session.session_id}")
        return self._task

    def stop(self) -> asyncio.Task | None:
        """Stop issuing reads and cancel the in-flight request or retry timer."""
        self._stopped = True
        task = self._task
        if task is not None and task is not asyncio.current_task():
            task.cancel()
        return task

    async def _run(self, session: Session) -> None:
        while not self._stopped:
            try:
                encoded = await self._transport.read(session, self._read_count)
            except TransientRelayError:
                await wait_before_retry(
                    self._backoff,
                    operation=RELAY_READ_PATH,
                    notify=self._notify,
                    sleep_fn=self._sleep_fn,
                )
                continue
            except SessionGoneError as exc:
                logger.info("relay dropped session %s on read", session.session_id)
                self._on_terminal(exc)
                return

            if self._stopped or not self._deliver(encoded):
                return

    def _deliver(self, encoded: str) -> bool:
        try:
            data = decode_bytes(encoded)
        except MalformedEncodingError as exc:
            logger.error("closing stream on malformed relay data: %s", exc.detail)
            self._on_terminal(exc)
            return False

        self._read_count += approx_decoded_length(len(encoded))
        if data:
            try:
                self._on_data(data)
            except Exception as exc:
                logger.exception("inbound data consumer failed; closing stream")
                self._on_terminal(exc)
                return False

        if self._backoff.on_success():
            logger.info("read recovered")
        return not self._stopped


__all__ = ["DataFn", "ReadLoop", "TerminalFn"]
