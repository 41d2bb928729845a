from __future__ import annotations

import math

import pytest

from fakes.relay import RELAY_URL, ScriptedRelay
from fakes.timing import FakeSleep, settle, wait_until
from relay_tunnel.state.session import Session
from relay_tunnel.stream.codec import encode_bytes
from relay_tunnel.stream.transport import RelayTransport
from relay_tunnel.stream.write_queue import WriteQueue, split_chunks
from relay_tunnel.errors import SessionGoneError, StreamStateError

SESSION = Session(relay_base_url=RELAY_URL, session_id="sid-1", target_host="target", target_port=22)


def test_split_chunks_keeps_order_and_bound() -> None:
    encoded = encode_bytes(bytes(range(256)) * 8)
    chunks = split_chunks(encoded, 1024)
    assert len(chunks) == math.ceil(len(encoded) / 1024)
    assert all(len(c) <= 1024 for c in chunks)
    assert "".join(chunks) == encoded


@pytest.mark.asyncio
async def test_enqueue_splits_large_payload(relay: ScriptedRelay) -> None:
    payload = bytes(range(256)) * 8
    async with relay.client() as http:
        queue = WriteQueue(transport=RelayTransport(client=http), on_terminal=lambda exc: None)
        queue.attach(SESSION)
        added = queue.enqueue(payload)
        pending = queue.pending
        await queue.join()

    encoded = encode_bytes(payload)
    assert added == len(pending) == math.ceil(len(encoded) / 1024)
    assert [r.url.params["data"] for r in relay.sent("write")] == list(pending)
    assert queue.pending == ()


@pytest.mark.asyncio
async def test_failed_head_chunk_is_retried_before_pop(relay: ScriptedRelay) -> None:
    relay.script("write", 503)
    sleep = FakeSleep(hold=True)
    async with relay.client() as http:
        queue = WriteQueue(
            transport=RelayTransport(client=http),
            on_terminal=lambda exc: None,
            max_chunk_length=8,
            sleep_fn=sleep,
        )
        queue.attach(SESSION)
        queue.enqueue(b"123456789")
        first, second = queue.pending

        await wait_until(lambda: len(sleep.delays) == 1)
        assert queue.write_count == 0
        assert queue.pending == (first, second)
        assert queue.backoff_ms == 95

        sleep.released.set()
        await queue.join()

    sent = relay.sent("write")
    assert [r.url.params["data"] for r in sent] == [first, first, second]
    assert [r.url.params["wcnt"] for r in sent] == ["0", "0", "6"]
    assert queue.write_count == 6 + 3
    assert queue.backoff_ms == 0


@pytest.mark.asyncio
async def test_writes_are_never_pipelined(relay: ScriptedRelay, fake_sleep: FakeSleep) -> None:
    async with relay.client() as http:
        queue = WriteQueue(transport=RelayTransport(client=http), on_terminal=lambda exc: None, sleep_fn=fake_sleep)
        queue.attach(SESSION)
        queue.enqueue(b"first")
        queue.enqueue(b"second")
        queue.enqueue(b"third")
        await queue.join()

    sent = relay.sent("write")
    expected = [encode_bytes(b"first"), encode_bytes(b"second"), encode_bytes(b"third")]
    assert [r.url.params["data"] for r in sent] == expected
    assert [r.url.params["wcnt"] for r in sent] == ["0", "5", "11"]


@pytest.mark.asyncio
async def test_session_gone_discards_queue(relay: ScriptedRelay) -> None:
    relay.script("write", 410)
    reasons: list[BaseException] = []
    async with relay.client() as http:
        queue = WriteQueue(transport=RelayTransport(client=http), on_terminal=reasons.append, max_chunk_length=4)
        queue.attach(SESSION)
        queue.enqueue(b"abcdefgh")
        await queue.join()

    assert len(relay.sent("write")) == 1
    assert isinstance(reasons[0], SessionGoneError)
    assert queue.pending == ()


@pytest.mark.asyncio
async def test_stop_cancels_pending_retry(relay: ScriptedRelay) -> None:
    relay.script("write", 500)
    sleep = FakeSleep(hold=True)
    async with relay.client() as http:
        queue = WriteQueue(transport=RelayTransport(client=http), on_terminal=lambda exc: None, sleep_fn=sleep)
        queue.attach(SESSION)
        queue.enqueue(b"data")
        await wait_until(lambda: len(sleep.delays) == 1)

        queue.stop()
        sleep.released.set()
        await settle()

    assert len(relay.sent("write")) == 1
    assert queue.task is not None and queue.task.cancelled()


@pytest.mark.asyncio
async def test_enqueue_requires_session(relay: ScriptedRelay) -> None:
    async with relay.client() as http:
        queue = WriteQueue(transport=RelayTransport(client=http), on_terminal=lambda exc: None)
        with pytest.raises(StreamStateError):
            queue.enqueue(b"early")

    assert relay.sent("write") == []


@pytest.mark.asyncio
async def test_empty_write_is_ignored(relay: ScriptedRelay) -> None:
    async with relay.client() as http:
        queue = WriteQueue(transport=RelayTransport(client=http), on_terminal=lambda exc: None)
        queue.attach(SESSION)
        assert queue.enqueue(b"") == 0
        assert queue.task is None
