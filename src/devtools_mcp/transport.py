"""SSE transport: the stream endpoint and the message endpoint.

A client opens ``GET <sse_path>`` and first receives an ``endpoint`` event
naming the URL to POST messages to. Each POST to that URL is acknowledged with
``202 Accepted``; the JSON-RPC response travels back over the open stream as a
``message`` event.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, Dict
from urllib.parse import quote

import orjson
from mcp import types
from mcp.server.fastmcp.utilities.logging import get_logger
from sse_starlette.sse import EventSourceResponse, ServerSentEvent
from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response

from devtools_mcp.payload import DecodeError, decode_payload
from devtools_mcp.protocol import McpProtocol, jsonrpc_error, parse_error
from devtools_mcp.schema_types import ERROR_DECODE, ERROR_SESSION_NOT_FOUND
from devtools_mcp.sessions import Session, SessionStore

logger = get_logger(__name__)

SESSION_QUERY_PARAM = "sessionId"


def _encode_event_data(message: Dict[str, Any]) -> str:
    try:
        return orjson.dumps(
            message, default=str, option=orjson.OPT_NON_STR_KEYS
        ).decode("utf-8")
    except TypeError:
        request_id = message.get("id")
        logger.exception("Response to request %r cannot be encoded", request_id)
        fallback = jsonrpc_error(request_id, types.INTERNAL_ERROR, "Response could not be encoded")
        return orjson.dumps(fallback, default=str).decode("utf-8")


class SseTransport:
    def __init__(
        self,
        store: SessionStore,
        protocol: McpProtocol,
        *,
        message_path: str = "/messages",
        ping_interval: int = 15,
    ) -> None:
        self.store = store
        self.protocol = protocol
        self.message_path = message_path
        self.ping_interval = ping_interval

    def endpoint_for(self, session: Session, root_path: str = "") -> str:
        return f"{root_path}{self.message_path}?{SESSION_QUERY_PARAM}={quote(session.id)}"

    async def event_stream(self, session: Session, endpoint: str) -> AsyncIterator[ServerSentEvent]:
        """Yield the ``endpoint`` event, then every message sent to ``session``.

        The session is removed from the store however the stream ends: peer
        disconnect (cancellation), error, or the session being closed.
        """

        try:
            yield ServerSentEvent(event="endpoint", data=endpoint)
            async for message in session.messages():
                yield ServerSentEvent(event="message", data=_encode_event_data(message))
        finally:
            self.store.close_session(session.id)

    async def handle_sse(self, request: Request) -> Response:
        session = self.store.open_session()
        endpoint = self.endpoint_for(session, request.scope.get("root_path", ""))
        logger.debug("Advertising %s to session %s", endpoint, session.id)
        return EventSourceResponse(
            self.event_stream(session, endpoint),
            ping=self.ping_interval,
            background=BackgroundTask(self.release, session.id),
        )

    async def release(self, session_id: str) -> None:
        self.store.close_session(session_id)

    async def handle_post_message(self, request: Request) -> Response:
        session_id = request.query_params.get(SESSION_QUERY_PARAM)
        if not session_id:
            return PlainTextResponse(f"{SESSION_QUERY_PARAM} is required", status_code=400)

        session = self.store.get(session_id)
        if session is None:
            logger.info("Message for unknown session %s", session_id)
            return JSONResponse(
                {
                    "error": "No transport found for sessionId",
                    "code": ERROR_SESSION_NOT_FOUND,
                },
                status_code=404,
            )

        session.touch()
        body = await request.body()
        try:
            payload = decode_payload(body)
        except DecodeError as exc:
            logger.info("Rejected message for session %s: %s", session_id, exc)
            return JSONResponse(
                {"error": str(exc), "code": ERROR_DECODE, "reason": exc.reason},
                status_code=400,
                background=BackgroundTask(self.reject, session, parse_error(str(exc))),
            )

        return PlainTextResponse(
            "Accepted",
            status_code=202,
            background=BackgroundTask(self.process, session, payload),
        )

    async def process(self, session: Session, payload: Any) -> None:
        """Run ``payload`` through the protocol and write responses to the stream.

        The session lock keeps responses in dispatch order. A session closed
        while this runs simply drops the late writes.
        """

        async with session.lock:
            responses = await self.protocol.handle(session, payload)
            for response in responses:
                session.send(response)

    async def reject(self, session: Session, error: Dict[str, Any]) -> None:
        """Queue a parse ``error`` behind any dispatch already holding the lock."""

        async with session.lock:
            session.send(error)


__all__ = ["SESSION_QUERY_PARAM", "SseTransport"]
