"""HTTP access to the relay's proxy/read/write endpoints.

Every failure is translated here into the relay error taxonomy so the
pipelines above only deal with `SessionGoneError` (stop) and
`TransientRelayError` (back off and retry).
"""

from __future__ import annotations

import logging

import httpx

from relay_tunnel.state.session import Session
from relay_tunnel.state.settings import ClientSettings
from relay_tunnel.runtime.settings import load_client_settings
from relay_tunnel.errors import SessionGoneError, SessionOpenError, TransientRelayError
from relay_tunnel.config.relay import (
    RELAY_KEY_DATA,
    RELAY_KEY_HOST,
    RELAY_KEY_PORT,
    HTTP_STATUS_OK,
    RELAY_READ_PATH,
    HTTP_STATUS_GONE,
    RELAY_PROXY_PATH,
    RELAY_WRITE_PATH,
    RELAY_KEY_SESSION_ID,
    RELAY_KEY_READ_COUNT,
    RELAY_KEY_WRITE_COUNT,
)

logger = logging.getLogger(__name__)


def build_timeout(settings: ClientSettings) -> httpx.Timeout:
    read_timeout = settings.read_timeout_s or None
    return httpx.Timeout(read_timeout, connect=settings.connect_timeout_s)


def endpoint_url(relay_base_url: str, path: str) -> str:
    base = relay_base_url if relay_base_url.endswith("/") else f"{relay_base_url}/"
    return f"{base}{path}"


class RelayTransport:
    """Issues the relay GET requests.

    An injected `httpx.AsyncClient` carries whatever ambient authentication
    (cookies, headers) the caller has set up for the relay; without one the
    transport builds and owns its own client.
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        settings: ClientSettings | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=build_timeout(settings or load_client_settings()))

    async def open_session(self, relay_base_url: str, host: str, port: int) -> str:
        url = endpoint_url(relay_base_url, RELAY_PROXY_PATH)
        logger.debug("requesting relay session at %s for %s:%s", url, host, port)
        try:
            response = await self._client.get(url, params={RELAY_KEY_HOST: host, RELAY_KEY_PORT: str(port)})
        except httpx.HTTPError as exc:
            raise SessionOpenError(status=None, reason=str(exc) or type(exc).__name__) from exc
        if response.status_code != HTTP_STATUS_OK:
            raise SessionOpenError(status=response.status_code, reason=response.reason_phrase)
        session_id = response.text.strip()
        if not session_id:
            raise SessionOpenError(status=response.status_code, reason="empty session id")
        return session_id

    async def read(self, session: Session, read_count: int) -> str:
        params = {
            RELAY_KEY_SESSION_ID: session.session_id,
            RELAY_KEY_READ_COUNT: str(read_count),
        }
        return await self._get(RELAY_READ_PATH, session, params)

    async def write(self, session: Session, write_count: int, chunk: str) -> None:
        params = {
            RELAY_KEY_SESSION_ID: session.session_id,
            RELAY_KEY_WRITE_COUNT: str(write_count),
            RELAY_KEY_DATA: chunk,
        }
        await self._get(RELAY_WRITE_PATH, session, params)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, operation: str, session: Session, params: dict[str, str]) -> str:
        url = endpoint_url(session.relay_base_url, operation)
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise TransientRelayError(
                operation=operation,
                status=None,
                reason=str(exc) or type(exc).__name__,
            ) from exc
        if response.status_code == HTTP_STATUS_GONE:
            raise SessionGoneError(session_id=session.session_id, operation=operation)
        if response.status_code != HTTP_STATUS_OK:
            raise TransientRelayError(
                operation=operation,
                status=response.status_code,
                reason=response.reason_phrase,
            )
        return response.text


__all__ = ["RelayTransport", "build_timeout", "endpoint_url"]
