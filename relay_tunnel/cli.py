"""Tunnel stdin/stdout through the relay.

Meant to be used as an OpenSSH ProxyCommand:

    ssh -o ProxyCommand='relay-tunnel --relay-host relay.example.com %h %p' user@target
"""

from __future__ import annotations

import sys
import asyncio
import logging
import argparse
import contextlib
from typing import BinaryIO

from relay_tunnel.errors import SessionGoneError
from relay_tunnel.state.lifecycle import StreamLifecycle
from relay_tunnel.stream.client import RelayStreamClient
from relay_tunnel.stream.transport import RelayTransport
from relay_tunnel.runtime.logging import configure_logging
from relay_tunnel.config.relay import DEFAULT_TARGET_PORT
from relay_tunnel.discovery.destination import Destination
from relay_tunnel.discovery.resolver import StaticRelayResolver

logger = logging.getLogger(__name__)

STDIN_READ_BYTES = 4096


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Tunnel a byte stream (e.g. ssh) over an HTTP relay")
    relay = parser.add_mutually_exclusive_group(required=True)
    relay.add_argument("--relay-url", help="Relay base URL, e.g. http://relay.example.com:8023/")
    relay.add_argument("--relay-host", help="Relay host name; the default relay URL pattern is applied")
    parser.add_argument("--relay-port", type=int, default=None, help="Relay port used with --relay-host")
    parser.add_argument("--user", default="", help="Remote user (only used to label the destination)")
    parser.add_argument("host", help="Target host the relay connects to")
    parser.add_argument("port", nargs="?", type=int, default=DEFAULT_TARGET_PORT, help="Target port")
    return parser.parse_args(argv)


async def _pump_stdin(reader: asyncio.StreamReader, client: RelayStreamClient) -> None:
    while client.state is StreamLifecycle.OPEN:
        chunk = await reader.read(STDIN_READ_BYTES)
        if not chunk or client.state is not StreamLifecycle.OPEN:
            break
        client.write(chunk)
    # Let queued writes reach the relay before the stream is torn down.
    await client.write_queue.join()


def _exit_status(reason: BaseException | None) -> int:
    if reason is None:
        return 0
    if isinstance(reason, SessionGoneError):
        # The relay answers 410 once the target hangs up; a normal logout.
        logger.info("relay session ended by target: %r", reason)
        return 0
    logger.error("relay connection closed: %r", reason)
    return 1


async def run_tunnel(
    relay_base_url: str,
    host: str,
    port: int,
    *,
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
    transport: RelayTransport | None = None,
) -> int:
    loop = asyncio.get_running_loop()
    out = stdout or sys.stdout.buffer
    closed = asyncio.Event()

    def on_data(data: bytes) -> None:
        out.write(data)
        out.flush()

    def show_notice(message: str, duration_ms: int) -> None:
        logger.warning("%s (next attempt in under %.1fs)", message, duration_ms / 1000)

    client = RelayStreamClient(
        on_data=on_data,
        show_notice=show_notice,
        on_close=lambda _reason: closed.set(),
        transport=transport,
    )
    pipe = None
    try:
        if not await client.open(host, port, relay_base_url):
            return 1

        reader = asyncio.StreamReader()
        protocol = asyncio.StreamReaderProtocol(reader)
        pipe, _ = await loop.connect_read_pipe(lambda: protocol, stdin or sys.stdin.buffer)

        pump = asyncio.create_task(_pump_stdin(reader, client))
        closed_wait = asyncio.create_task(closed.wait())
        await asyncio.wait({pump, closed_wait}, return_when=asyncio.FIRST_COMPLETED)
        for task in (pump, closed_wait):
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
    finally:
        if pipe is not None:
            pipe.close()
        await client.aclose()

    return _exit_status(client.close_reason)


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = _parse_args(argv)

    resolver = StaticRelayResolver(args.relay_url or args.relay_host, port=args.relay_port)
    destination = Destination(user=args.user, host=args.host, proxy=args.relay_host or args.relay_url, port=args.port)
    relay_base_url = resolver.resolve(destination)
    logger.info("connecting %s via %s", destination, relay_base_url)

    try:
        return asyncio.run(run_tunnel(relay_base_url, args.host, args.port))
    except KeyboardInterrupt:
        return 130


__all__ = ["main", "run_tunnel"]
