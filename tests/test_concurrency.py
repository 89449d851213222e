from __future__ import annotations

import asyncio

import pytest

from devtools_mcp.protocol import McpProtocol, parse_error
from devtools_mcp.registry import Dispatcher, ToolRegistry
from devtools_mcp.sessions import SessionStore
from devtools_mcp.tool_inputs import ExplainCodeInput
from devtools_mcp.transport import SseTransport

from conftest import call_tool, drain


def _slow_transport(store: SessionStore) -> SseTransport:
    registry = ToolRegistry()

    @registry.tool("sleep", "Sleep for `code` seconds and echo it", ExplainCodeInput)
    async def sleep(params):
        await asyncio.sleep(float(params.code))
        return {"success": True, "content": params.code}

    protocol = McpProtocol(Dispatcher(registry), server_name="t", server_version="0")
    return SseTransport(store, protocol)


@pytest.mark.asyncio
async def test_responses_keep_dispatch_order_within_session() -> None:
    store = SessionStore()
    transport = _slow_transport(store)
    session = store.open_session()

    await asyncio.gather(
        transport.process(session, call_tool(1, "sleep", {"code": "0.05"})),
        transport.process(session, call_tool(2, "sleep", {"code": "0"})),
        transport.process(session, call_tool(3, "sleep", {"code": "0.01"})),
    )

    assert [message["id"] for message in drain(session)] == [1, 2, 3]


@pytest.mark.asyncio
async def test_sessions_dispatch_concurrently() -> None:
    store = SessionStore()
    transport = _slow_transport(store)
    slow = store.open_session()
    fast = store.open_session()
    order: list[str] = []

    async def run(session, delay: str, label: str) -> None:
        await transport.process(session, call_tool(1, "sleep", {"code": delay}))
        order.append(label)

    await asyncio.gather(run(slow, "0.05", "slow"), run(fast, "0", "fast"))

    assert order == ["fast", "slow"]


@pytest.mark.asyncio
async def test_late_write_to_closed_session_is_dropped() -> None:
    store = SessionStore()
    transport = _slow_transport(store)
    session = store.open_session()

    task = asyncio.create_task(transport.process(session, call_tool(1, "sleep", {"code": "0.02"})))
    await asyncio.sleep(0)
    store.close_session(session.id)
    await task

    assert drain(session) == []
    assert session.id not in store


@pytest.mark.asyncio
async def test_handler_fault_does_not_affect_other_sessions(store: SessionStore) -> None:
    registry = ToolRegistry()

    @registry.tool("boom", "Raises", ExplainCodeInput)
    def boom(params):
        raise RuntimeError(params.code)

    registry.register("echo", "Echo", ExplainCodeInput, lambda params: params.code)
    transport = SseTransport(
        store, McpProtocol(Dispatcher(registry), server_name="t", server_version="0")
    )
    broken = store.open_session()
    healthy = store.open_session()

    await asyncio.gather(
        transport.process(broken, call_tool(1, "boom", {"code": "x"})),
        transport.process(healthy, call_tool(1, "echo", {"code": "y"})),
    )

    [failed] = drain(broken)
    [succeeded] = drain(healthy)
    assert failed["result"]["structuredContent"]["code"] == "handler_fault"
    assert succeeded["result"]["structuredContent"]["content"] == "y"


@pytest.mark.asyncio
async def test_parse_error_waits_behind_earlier_dispatch() -> None:
    store = SessionStore()
    transport = _slow_transport(store)
    session = store.open_session()

    await asyncio.gather(
        transport.process(session, call_tool(1, "sleep", {"code": "0.05"})),
        transport.reject(session, parse_error("Malformed JSON")),
    )

    first, second = drain(session)
    assert first["id"] == 1
    assert second["id"] is None
    assert second["error"]["code"] == -32700
