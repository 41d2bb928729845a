"""Tunnel a raw byte stream (typically ssh) over an HTTP relay."""

from .state import Session, StreamLifecycle
from .stream import DuplexStream, RelayTransport, RelayStreamClient
from .discovery import Destination, StaticRelayResolver, relay_base_url
from .errors import (
    SessionGoneError,
    SessionOpenError,
    StreamStateError,
    TransientRelayError,
    CounterMismatchError,
    MalformedEncodingError,
)

__version__ = "1.0.0"

__all__ = [
    "CounterMismatchError",
    "Destination",
    "DuplexStream",
    "MalformedEncodingError",
    "RelayStreamClient",
    "RelayTransport",
    "Session",
    "SessionGoneError",
    "SessionOpenError",
    "StaticRelayResolver",
    "StreamLifecycle",
    "StreamStateError",
    "TransientRelayError",
    "__version__",
    "relay_base_url",
]
