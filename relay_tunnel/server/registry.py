"""Relay session registry."""

from __future__ import annotations

import uuid
import asyncio
import logging

from relay_tunnel.state.settings import ServerSettings

from .session import RelaySession

logger = logging.getLogger(__name__)


class SessionRegistry:
    def __init__(self, settings: ServerSettings) -> None:
        self._settings = settings
        self._sessions: dict[str, RelaySession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    async def open(self, host: str, port: int) -> RelaySession:
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port),
            timeout=self._settings.target_connect_timeout_s,
        )
        session = RelaySession(
            uuid.uuid4().hex,
            reader,
            writer,
            read_max_bytes=self._settings.read_max_bytes,
        )
        self._sessions[session.session_id] = session
        logger.info("session %s: connected to %s:%s", session.session_id, host, port)
        return session

    def get(self, session_id: str) -> RelaySession | None:
        return self._sessions.get(session_id)

    async def drop(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return
        logger.info("session %s: closed", session_id)
        await session.close()

    async def close_all(self) -> None:
        for session_id in list(self._sessions):
            await self.drop(session_id)


__all__ = ["SessionRegistry"]
