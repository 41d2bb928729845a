from .events import StreamEvent
from .session import Session
from .settings import ClientSettings, ServerSettings, BackoffSettings
from .lifecycle import StreamLifecycle, next_state

__all__ = [
    "BackoffSettings",
    "ClientSettings",
    "ServerSettings",
    "Session",
    "StreamEvent",
    "StreamLifecycle",
    "next_state",
]
