from __future__ import annotations

import pytest

from fakes.relay import RELAY_URL, ScriptedRelay
from fakes.timing import FakeSleep, settle, wait_until
from relay_tunnel.state import StreamLifecycle
from relay_tunnel.stream.capability import DuplexStream
from relay_tunnel.stream.client import RelayStreamClient
from relay_tunnel.stream.transport import RelayTransport
from relay_tunnel.errors import SessionGoneError, SessionOpenError, StreamStateError


class _Recorder:
    def __init__(self) -> None:
        self.data: list[bytes] = []
        self.notices: list[tuple[str, int]] = []
        self.opened: list[bool] = []
        self.closed: list[BaseException | None] = []

    def client(self, http, sleep_fn=None) -> RelayStreamClient:
        return RelayStreamClient(
            on_data=self.data.append,
            show_notice=lambda message, duration: self.notices.append((message, duration)),
            on_open_complete=self.opened.append,
            on_close=self.closed.append,
            transport=RelayTransport(client=http),
            sleep_fn=sleep_fn,
        )


@pytest.mark.asyncio
async def test_open_establishes_session_and_starts_reading(relay: ScriptedRelay) -> None:
    recorder = _Recorder()
    async with relay.client() as http:
        client = recorder.client(http)
        assert isinstance(client, DuplexStream)
        assert client.state is StreamLifecycle.OPENING

        assert await client.open("target", 2222, RELAY_URL) is True
        await wait_until(lambda: len(relay.sent("read")) == 1)

        assert client.state is StreamLifecycle.OPEN
        assert client.session is not None
        assert client.session.session_id == "sid-1"
        assert client.session.target_port == 2222
        assert recorder.opened == [True]
        await client.aclose()

    assert client.state is StreamLifecycle.CLOSED
    assert recorder.closed == [None]


@pytest.mark.asyncio
async def test_open_failure_closes_for_good(relay: ScriptedRelay) -> None:
    relay.script("proxy", 502)
    recorder = _Recorder()
    async with relay.client() as http:
        client = recorder.client(http)
        assert await client.open("target", 22, RELAY_URL) is False

        assert client.state is StreamLifecycle.CLOSED
        assert recorder.opened == [False]
        assert isinstance(recorder.closed[0], SessionOpenError)
        with pytest.raises(StreamStateError):
            await client.open("target", 22, RELAY_URL)
        with pytest.raises(StreamStateError):
            client.write(b"late")

    assert relay.sent("read") == []


@pytest.mark.asyncio
async def test_caller_misuse_is_rejected_without_state_change(relay: ScriptedRelay) -> None:
    recorder = _Recorder()
    async with relay.client() as http:
        client = recorder.client(http)
        with pytest.raises(StreamStateError):
            client.write(b"too early")
        assert client.state is StreamLifecycle.OPENING

        await client.open("target", 22, RELAY_URL)
        with pytest.raises(StreamStateError) as excinfo:
            client.write(b"data", on_write=lambda: None)
        assert excinfo.value.operation == "write callback"
        assert client.state is StreamLifecycle.OPEN
        await client.aclose()

    assert relay.sent("write") == []


@pytest.mark.asyncio
async def test_session_gone_on_third_read_closes_stream(relay: ScriptedRelay) -> None:
    relay.script("read", (200, "aGk"), (200, "dGhlcmU"), 410)
    recorder = _Recorder()
    async with relay.client() as http:
        client = recorder.client(http)
        await client.open("target", 22, RELAY_URL)
        await wait_until(lambda: client.state is StreamLifecycle.CLOSED)
        await settle()
        await client.aclose()

    assert recorder.data == [b"hi", b"there"]
    assert len(relay.sent("read")) == 3
    assert isinstance(client.close_reason, SessionGoneError)
    assert len(recorder.closed) == 1


@pytest.mark.asyncio
async def test_write_round_trip_advances_write_count(relay: ScriptedRelay) -> None:
    recorder = _Recorder()
    async with relay.client() as http:
        client = recorder.client(http)
        await client.open("target", 22, RELAY_URL)
        client.write(b"ls -la\n")
        await client.write_queue.join()
        await client.aclose()

    (request,) = relay.sent("write")
    assert request.url.params["data"] == "bHMgLWxhCg"
    assert request.url.params["sid"] == "sid-1"
    assert client.write_count == 7


@pytest.mark.asyncio
async def test_close_during_backoff_sends_nothing_more(relay: ScriptedRelay) -> None:
    relay.script("write", 500)
    sleep = FakeSleep(hold=True)
    recorder = _Recorder()
    async with relay.client() as http:
        client = recorder.client(http, sleep_fn=sleep)
        await client.open("target", 22, RELAY_URL)
        client.write(b"pending")
        await wait_until(lambda: len(sleep.delays) == 1)

        client.close()
        sleep.released.set()
        await settle()
        await client.aclose()

    assert len(relay.sent("write")) == 1
    assert len(relay.sent("read")) == 1
    assert recorder.closed == [None]


@pytest.mark.asyncio
async def test_read_and_write_backoff_are_independent(relay: ScriptedRelay, fake_sleep: FakeSleep) -> None:
    relay.script("read", 503, 503)
    recorder = _Recorder()
    async with relay.client() as http:
        client = recorder.client(http, sleep_fn=fake_sleep)
        await client.open("target", 22, RELAY_URL)
        await wait_until(lambda: len(relay.sent("read")) == 3)
        client.write(b"x")
        await client.write_queue.join()

        assert client.read_backoff_ms == 283
        assert client.write_backoff_ms == 0
        await client.aclose()


@pytest.mark.asyncio
async def test_slow_retries_surface_notice(relay: ScriptedRelay, fake_sleep: FakeSleep) -> None:
    relay.script("read", *([500] * 5))
    recorder = _Recorder()
    async with relay.client() as http:
        client = recorder.client(http, sleep_fn=fake_sleep)
        await client.open("target", 22, RELAY_URL)
        await wait_until(lambda: len(relay.sent("read")) == 6)
        await client.aclose()

    assert len(recorder.notices) == 1
    assert recorder.notices[0][1] == 1411 + 500
