"""Stream lifecycle states and the transition function between them."""

from __future__ import annotations

import enum

from relay_tunnel.errors import StreamStateError

from .events import StreamEvent


class StreamLifecycle(enum.Enum):
    OPENING = "opening"
    OPEN = "open"
    CLOSED = "closed"


def next_state(state: StreamLifecycle, event: StreamEvent) -> StreamLifecycle:
    """Return the state reached from *state* on *event*.

    CLOSE is accepted from every state and CLOSED is terminal. The remaining
    events only make sense while the session is still being established.
    """
    if event is StreamEvent.CLOSE:
        return StreamLifecycle.CLOSED
    if state is not StreamLifecycle.OPENING:
        raise StreamStateError(operation=event.value, state=state.value)
    if event is StreamEvent.SESSION_ESTABLISHED:
        return StreamLifecycle.OPEN
    return StreamLifecycle.CLOSED


__all__ = ["StreamLifecycle", "next_state"]
