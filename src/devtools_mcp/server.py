from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Dict, List, Optional, Sequence, Tuple

from mcp.server.fastmcp.utilities.logging import get_logger
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from devtools_mcp.config import ServerSettings
from devtools_mcp.protocol import McpProtocol
from devtools_mcp.registry import Dispatcher, ToolRegistry
from devtools_mcp.sessions import SessionStore
from devtools_mcp.tool_spec import build_tool_spec, definitions_from_registry
from devtools_mcp.tools import ALL_TOOLS
from devtools_mcp.transport import SseTransport

try:  # pragma: no cover - metadata lookup may fail in tests
    SERVER_VERSION = version("devtools-mcp")
except PackageNotFoundError:  # pragma: no cover - local dev fallback
    SERVER_VERSION = "0.0.0"

SERVER_NAME = "MCP Dev Tools Server"

logger = get_logger(__name__)


def build_registry(
    definitions: Sequence[Tuple[str, Dict[str, Any]]] = ALL_TOOLS,
) -> ToolRegistry:
    """Return a registry holding every tool in ``definitions``."""

    registry = ToolRegistry()
    for name, meta in definitions:
        registry.register(
            name,
            meta["description"],
            meta["model"],
            meta["handler"],
            annotations=meta.get("annotations"),
        )
    return registry


async def expire_idle_sessions(store: SessionStore, max_idle: float, interval: float) -> None:
    """Close sessions idle longer than ``max_idle`` every ``interval`` seconds."""

    while True:
        await asyncio.sleep(interval)
        expired = store.expire_idle(max_idle)
        if expired:
            logger.info("Expired %d idle session(s)", len(expired))


def _reaper_interval(max_idle: float) -> float:
    return max(1.0, min(60.0, max_idle / 2))


def create_app(
    *,
    settings: Optional[ServerSettings] = None,
    registry: Optional[ToolRegistry] = None,
    store: Optional[SessionStore] = None,
) -> Starlette:
    """Assemble the Starlette application serving the SSE and message endpoints.

    ``registry`` and ``store`` are injectable so tests can run isolated
    servers side by side.
    """

    settings = settings or ServerSettings()
    registry = registry if registry is not None else build_registry()
    store = store if store is not None else SessionStore()

    protocol = McpProtocol(
        Dispatcher(registry),
        server_name=SERVER_NAME,
        server_version=SERVER_VERSION,
    )
    transport = SseTransport(
        store,
        protocol,
        message_path=settings.message_path,
        ping_interval=settings.ping_interval,
    )

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        reaper: asyncio.Task[None] | None = None
        if settings.session_idle_timeout > 0:
            reaper = asyncio.create_task(
                expire_idle_sessions(
                    store,
                    settings.session_idle_timeout,
                    _reaper_interval(settings.session_idle_timeout),
                )
            )
        logger.info(
            "Serving %d tool(s) on %s (idle timeout %ss)",
            len(registry),
            settings.sse_path,
            settings.session_idle_timeout or "disabled",
        )
        try:
            yield
        finally:
            if reaper is not None:
                reaper.cancel()
                try:
                    await reaper
                except asyncio.CancelledError:
                    pass
            closed = store.close_all()
            logger.info("Shut down with %d open session(s) closed", closed)

    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "ok",
                "server": SERVER_NAME,
                "version": SERVER_VERSION,
                "sessions": len(store),
                "tools": registry.names(),
            }
        )

    async def tool_spec(request: Request) -> JSONResponse:
        return JSONResponse(build_tool_spec(definitions_from_registry(registry)))

    routes: List[Route] = [
        Route(settings.sse_path, endpoint=transport.handle_sse, methods=["GET"]),
        Route(settings.message_path, endpoint=transport.handle_post_message, methods=["POST"]),
        Route("/health", endpoint=health, methods=["GET"]),
        Route("/tools", endpoint=tool_spec, methods=["GET"]),
    ]
    app = Starlette(routes=routes, lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = registry
    app.state.store = store
    app.state.transport = transport
    return app


__all__ = [
    "SERVER_NAME",
    "SERVER_VERSION",
    "build_registry",
    "create_app",
    "expire_idle_sessions",
]
