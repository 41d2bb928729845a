"""One logical duplex stream tunnelled over the relay.

The client establishes a relay session, then runs the read loop and the
write drain side by side on the current event loop. Either pipeline can end
the stream (session gone, corrupt data); `close()` ends it from outside.
"""

from __future__ import annotations

import asyncio
import logging
import contextlib
from collections.abc import Callable

from relay_tunnel.state.session import Session
from relay_tunnel.state.events import StreamEvent
from relay_tunnel.state.settings import ClientSettings
from relay_tunnel.runtime.settings import load_client_settings
from relay_tunnel.errors import SessionOpenError, StreamStateError
from relay_tunnel.state.lifecycle import StreamLifecycle, next_state

from .transport import RelayTransport
from .write_queue import WriteQueue
from .read_loop import DataFn, ReadLoop
from .backoff import SleepFn, NoticeFn, BackoffController

logger = logging.getLogger(__name__)

OpenCompleteFn = Callable[[bool], None]
CloseFn = Callable[[BaseException | None], None]


class RelayStreamClient:
    def __init__(
        self,
        *,
        on_data: DataFn,
        show_notice: NoticeFn | None = None,
        on_open_complete: OpenCompleteFn | None = None,
        on_close: CloseFn | None = None,
        transport: RelayTransport | None = None,
        settings: ClientSettings | None = None,
        sleep_fn: SleepFn | None = None,
    ) -> None:
        settings = settings or load_client_settings()
        self._owns_transport = transport is None
        self._transport = transport or RelayTransport(settings=settings)
        self._on_open_complete = on_open_complete
        self._on_close = on_close
        self._state = StreamLifecycle.OPENING
        self._opening = False
        self._session: Session | None = None
        self._close_reason: BaseException | None = None
        self._read_loop = ReadLoop(
            transport=self._transport,
            on_data=on_data,
            on_terminal=self.close,
            notify=show_notice,
            backoff=BackoffController(settings.backoff),
            sleep_fn=sleep_fn,
        )
        self._write_queue = WriteQueue(
            transport=self._transport,
            on_terminal=self.close,
            max_chunk_length=settings.max_chunk_length,
            notify=show_notice,
            backoff=BackoffController(settings.backoff),
            sleep_fn=sleep_fn,
        )

    @property
    def state(self) -> StreamLifecycle:
        return self._state

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def close_reason(self) -> BaseException | None:
        return self._close_reason

    @property
    def read_count(self) -> int:
        return self._read_loop.read_count

    @property
    def write_count(self) -> int:
        return self._write_queue.write_count

    @property
    def read_backoff_ms(self) -> int:
        return self._read_loop.backoff_ms

    @property
    def write_backoff_ms(self) -> int:
        return self._write_queue.backoff_ms

    @property
    def write_queue(self) -> WriteQueue:
        return self._write_queue

    async def open(self, target_host: str, target_port: int, relay_base_url: str) -> bool:
        """Establish the relay session and start reading.

        Returns whether the stream reached OPEN; `on_open_complete` receives
        the same value.
        """
        if self._state is not StreamLifecycle.OPENING or self._opening:
            raise StreamStateError(operation="open", state=self._state.value)

        self._opening = True
        try:
            session_id = await self._transport.open_session(relay_base_url, target_host, target_port)
        except SessionOpenError as exc:
            logger.warning("failed to get session id from %s: %s", relay_base_url, exc.reason)
            self._fail_open(exc)
            return False
        finally:
            self._opening = False

        if self._state is StreamLifecycle.CLOSED:
            # Closed while the session request was in flight.
            self._report_open(False)
            return False

        session = Session(
            relay_base_url=relay_base_url,
            session_id=session_id,
            target_host=target_host,
            target_port=int(target_port),
        )
        self._session = session
        self._state = next_state(self._state, StreamEvent.SESSION_ESTABLISHED)
        logger.info("relay session %s open to %s:%s", session_id, target_host, target_port)

        self._write_queue.attach(session)
        self._read_loop.start(session)
        self._report_open(True)
        return True

    def write(self, data: bytes, on_write: Callable[[], None] | None = None) -> None:
        """Queue *data* for the relay. Delivery is ordered but unacknowledged."""
        if on_write is not None:
            # Writes are unacknowledged; there is nothing to call back on.
            raise StreamStateError(operation="write callback", state=self._state.value)
        if self._state is not StreamLifecycle.OPEN:
            raise StreamStateError(operation="write", state=self._state.value)
        self._write_queue.enqueue(bytes(data))

    def close(self, reason: BaseException | None = None) -> None:
        if self._state is StreamLifecycle.CLOSED:
            return
        self._state = next_state(self._state, StreamEvent.CLOSE)
        self._close_reason = reason
        self._read_loop.stop()
        self._write_queue.stop()

        sid = self._session.session_id if self._session is not None else None
        if reason is None:
            logger.info("relay stream %s closed", sid)
        else:
            logger.info("relay stream %s closed: %r", sid, reason)
        if self._on_close is not None:
            self._on_close(reason)

    async def aclose(self) -> None:
        """Close the stream and wait for both pipelines to wind down."""
        self.close()
        for task in (self._read_loop.task, self._write_queue.task):
            if task is None or task is asyncio.current_task():
                continue
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if self._owns_transport:
            await self._transport.aclose()

    def _fail_open(self, exc: SessionOpenError) -> None:
        if self._state is StreamLifecycle.CLOSED:
            self._report_open(False)
            return
        self._state = next_state(self._state, StreamEvent.OPEN_FAILED)
        self._close_reason = exc
        self._report_open(False)
        if self._on_close is not None:
            self._on_close(exc)

    def _report_open(self, success: bool) -> None:
        if self._on_open_complete is not None:
            self._on_open_complete(success)


__all__ = ["CloseFn", "OpenCompleteFn", "RelayStreamClient"]
