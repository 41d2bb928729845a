from .app import create_app
from .session import RelaySession
from .registry import SessionRegistry

__all__ = ["RelaySession", "SessionRegistry", "create_app"]
