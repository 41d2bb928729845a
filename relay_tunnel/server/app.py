"""Reference HTTP relay (FastAPI) serving /proxy, /read and /write."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse, PlainTextResponse

from relay_tunnel.state.settings import ServerSettings
from relay_tunnel.runtime.settings import load_server_settings
from relay_tunnel.errors import CounterMismatchError, MalformedEncodingError
from relay_tunnel.config.relay import (
    HTTP_STATUS_GONE,
    HTTP_STATUS_BAD_GATEWAY,
    HTTP_STATUS_BAD_REQUEST,
)

from .registry import SessionRegistry

logger = logging.getLogger(__name__)


def _gone() -> PlainTextResponse:
    return PlainTextResponse("session gone", status_code=HTTP_STATUS_GONE)


def _bad_request(message: str) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=HTTP_STATUS_BAD_REQUEST)


def _registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def create_app(settings: ServerSettings | None = None) -> FastAPI:
    settings = settings or load_server_settings()
    registry = SessionRegistry(settings)

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        logger.info("relay: ready")
        try:
            yield
        finally:
            await registry.close_all()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)
    app.state.registry = registry
    app.state.settings = settings

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/proxy")
    async def proxy(request: Request, host: str, port: int) -> PlainTextResponse:
        try:
            session = await _registry(request).open(host, port)
        except (OSError, TimeoutError) as exc:
            logger.warning("target %s:%s unreachable: %s", host, port, exc)
            return PlainTextResponse("target unreachable", status_code=HTTP_STATUS_BAD_GATEWAY)
        return PlainTextResponse(session.session_id)

    @app.get("/read")
    async def read(request: Request, sid: str, rcnt: int) -> PlainTextResponse:
        sessions = _registry(request)
        session = sessions.get(sid)
        if session is None:
            return _gone()
        try:
            chunk = await session.read(rcnt, request.app.state.settings.read_hold_s)
        except CounterMismatchError as exc:
            return _bad_request(f"expected rcnt={exc.expected}")
        except OSError:
            logger.info("session %s: target read failed", sid, exc_info=True)
            chunk = None
        if chunk is None:
            await sessions.drop(sid)
            return _gone()
        return PlainTextResponse(chunk)

    @app.get("/write")
    async def write(request: Request, sid: str, wcnt: int, data: str = "") -> PlainTextResponse:
        sessions = _registry(request)
        session = sessions.get(sid)
        if session is None:
            return _gone()
        try:
            await session.write(wcnt, data)
        except CounterMismatchError as exc:
            return _bad_request(f"expected wcnt={exc.expected}")
        except MalformedEncodingError as exc:
            return _bad_request(exc.detail)
        except OSError:
            logger.info("session %s: target write failed", sid, exc_info=True)
            await sessions.drop(sid)
            return _gone()
        return PlainTextResponse("")

    return app


__all__ = ["create_app"]
