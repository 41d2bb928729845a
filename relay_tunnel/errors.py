"""Shared error types for the relay tunnel."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SessionOpenError(Exception):
    """Raised when the relay refuses or fails session establishment."""

    status: int | None
    reason: str


@dataclass(frozen=True, slots=True)
class SessionGoneError(Exception):
    """Raised when the relay answers 410: the session no longer exists."""

    session_id: str
    operation: str


@dataclass(frozen=True, slots=True)
class TransientRelayError(Exception):
    """Raised for any recoverable read/write failure (status or transport)."""

    operation: str
    status: int | None
    reason: str


@dataclass(frozen=True, slots=True)
class MalformedEncodingError(Exception):
    """Raised when inbound web-safe base64 cannot be restored or decoded."""

    length: int
    detail: str


@dataclass(frozen=True, slots=True)
class StreamStateError(Exception):
    """Raised when a stream operation is called in the wrong lifecycle state."""

    operation: str
    state: str


@dataclass(frozen=True, slots=True)
class CounterMismatchError(Exception):
    """Raised by the relay when a read/write counter does not match its tally."""

    operation: str
    expected: int
    received: int


__all__ = [
    "CounterMismatchError",
    "MalformedEncodingError",
    "SessionGoneError",
    "SessionOpenError",
    "StreamStateError",
    "TransientRelayError",
]
