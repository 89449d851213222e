"""Session table binding session identifiers to open SSE streams."""

from __future__ import annotations

import asyncio
import time
import uuid
from collections.abc import AsyncIterator
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from mcp.server.fastmcp.utilities.logging import get_logger

logger = get_logger(__name__)

_CLOSED = object()


def _new_session_id() -> str:
    return uuid.uuid4().hex


class Session:
    """One client conversation bound to a single outbound stream.

    ``outbox`` is the stream handle: the SSE generator drains it. ``lock``
    serializes dispatch-and-write so responses leave in dispatch order.
    """

    def __init__(self, session_id: str) -> None:
        self.id = session_id
        self.created_at = datetime.now(timezone.utc)
        self.last_active = time.monotonic()
        self.outbox: asyncio.Queue[Any] = asyncio.Queue()
        self.lock = asyncio.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def touch(self) -> None:
        self.last_active = time.monotonic()

    def send(self, message: Dict[str, Any]) -> bool:
        """Queue ``message`` for the stream; writes after close are dropped."""

        if self._closed:
            logger.debug("Dropping message for closed session %s", self.id)
            return False
        self.outbox.put_nowait(message)
        self.touch()
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.outbox.put_nowait(_CLOSED)

    async def messages(self) -> AsyncIterator[Dict[str, Any]]:
        """Yield queued messages until the session is closed."""

        while True:
            item = await self.outbox.get()
            if item is _CLOSED:
                return
            yield item

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"Session(id={self.id!r}, state={state})"


class SessionStore:
    """Explicitly owned table of open sessions.

    All mutations are single dict operations performed on the event loop
    thread, so a lookup never sees a partially registered session.
    """

    def __init__(self, *, id_factory: Optional[Callable[[], str]] = None) -> None:
        self._sessions: Dict[str, Session] = {}
        self._id_factory = id_factory or _new_session_id

    def open_session(self) -> Session:
        session_id = self._id_factory()
        while session_id in self._sessions:
            logger.warning("Session id collision on %s; minting another", session_id)
            session_id = self._id_factory()

        session = Session(session_id)
        self._sessions[session_id] = session
        logger.info("Opened session %s (%d open)", session_id, len(self._sessions))
        return session

    def close_session(self, session_id: str) -> bool:
        """Close and forget ``session_id``. Unknown ids are ignored."""

        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        logger.info("Closed session %s (%d open)", session_id, len(self._sessions))
        return True

    def get(self, session_id: Optional[str]) -> Optional[Session]:
        if session_id is None:
            return None
        return self._sessions.get(session_id)

    def ids(self) -> List[str]:
        return list(self._sessions)

    def close_all(self) -> int:
        closed = 0
        for session_id in self.ids():
            if self.close_session(session_id):
                closed += 1
        return closed

    def expire_idle(self, max_idle: float, *, now: Optional[float] = None) -> List[str]:
        """Close sessions idle for longer than ``max_idle`` seconds."""

        current = time.monotonic() if now is None else now
        expired = [
            session_id
            for session_id, session in list(self._sessions.items())
            if current - session.last_active > max_idle
        ]
        for session_id in expired:
            logger.info("Expiring idle session %s", session_id)
            self.close_session(session_id)
        return expired

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


__all__ = ["Session", "SessionStore"]
