"""Events that drive the stream lifecycle."""

from __future__ import annotations

import enum


class StreamEvent(enum.Enum):
    SESSION_ESTABLISHED = "session_established"
    OPEN_FAILED = "open_failed"
    CLOSE = "close"


__all__ = ["StreamEvent"]
