from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List

import httpx
import orjson
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from devtools_mcp.config import ServerSettings  # noqa: E402
from devtools_mcp.registry import Dispatcher  # noqa: E402
from devtools_mcp.server import build_registry, create_app  # noqa: E402
from devtools_mcp.sessions import Session, SessionStore  # noqa: E402


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def dispatcher(registry):
    return Dispatcher(registry)


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def app(registry, store):
    return create_app(
        settings=ServerSettings(session_idle_timeout=0),
        registry=registry,
        store=store,
    )


@pytest.fixture
def transport(app):
    return app.state.transport


def http_client(app) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    )


def call_tool(request_id: int, name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "tools/call",
        "params": {"name": name, "arguments": arguments},
    }


def drain(session: Session) -> List[Dict[str, Any]]:
    """Return every message currently queued on ``session`` without blocking."""

    messages: List[Dict[str, Any]] = []
    while not session.outbox.empty():
        item = session.outbox.get_nowait()
        if isinstance(item, dict):
            messages.append(item)
    return messages


def encode(message: Any) -> bytes:
    return orjson.dumps(message)


__all__ = ["call_tool", "drain", "encode", "http_client"]
