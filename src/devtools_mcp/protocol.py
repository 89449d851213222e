"""JSON-RPC routing of MCP messages received on a session."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, List, Optional

from mcp import types
from mcp.server.fastmcp.utilities.logging import get_logger
from mcp.shared.version import SUPPORTED_PROTOCOL_VERSIONS
from pydantic import ValidationError

from devtools_mcp.instructions import INSTRUCTIONS
from devtools_mcp.registry import Dispatcher
from devtools_mcp.sessions import Session

logger = get_logger(__name__)

JSONRPC_VERSION = "2.0"

MethodHandler = Callable[[Session, Dict[str, Any]], Awaitable[Dict[str, Any]]]


class ProtocolError(Exception):
    """A JSON-RPC level failure answered with an ``error`` member."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


def jsonrpc_result(request_id: Any, result: Dict[str, Any]) -> Dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def jsonrpc_error(request_id: Any, code: int, message: str, data: Any = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}


def parse_error(message: str) -> Dict[str, Any]:
    return jsonrpc_error(None, types.PARSE_ERROR, message)


class McpProtocol:
    """Route decoded MCP messages to method handlers.

    Requests produce exactly one response dict. Notifications and client
    responses produce none.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        *,
        server_name: str,
        server_version: str,
        instructions: str = INSTRUCTIONS,
    ) -> None:
        self.dispatcher = dispatcher
        self.server_name = server_name
        self.server_version = server_version
        self.instructions = instructions
        self._methods: Dict[str, MethodHandler] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
        }

    async def handle(self, session: Session, payload: Any) -> List[Dict[str, Any]]:
        """Handle a single message or a batch, returning responses in order."""

        if isinstance(payload, list):
            if not payload:
                return [jsonrpc_error(None, types.INVALID_REQUEST, "Empty batch")]
            responses: List[Dict[str, Any]] = []
            for message in payload:
                response = await self.handle_message(session, message)
                if response is not None:
                    responses.append(response)
            return responses

        response = await self.handle_message(session, payload)
        return [response] if response is not None else []

    async def handle_message(self, session: Session, message: Any) -> Optional[Dict[str, Any]]:
        if not isinstance(message, dict):
            return jsonrpc_error(None, types.INVALID_REQUEST, "Message must be an object")

        if "method" not in message:
            # Responses to server-initiated requests; this server sends none.
            logger.debug("Ignoring client response on session %s", session.id)
            return None

        if "id" not in message:
            logger.debug(
                "Received notification %s on session %s", message.get("method"), session.id
            )
            return None

        request_id = message.get("id")
        try:
            request = types.JSONRPCRequest.model_validate(message)
        except ValidationError:
            return jsonrpc_error(request_id, types.INVALID_REQUEST, "Invalid JSON-RPC request")

        handler = self._methods.get(request.method)
        if handler is None:
            return jsonrpc_error(
                request.id, types.METHOD_NOT_FOUND, f"Method not found: {request.method}"
            )

        try:
            result = await handler(session, request.params or {})
        except ProtocolError as exc:
            return jsonrpc_error(request.id, exc.code, exc.message, exc.data)
        except Exception:
            logger.exception(
                "Unexpected failure handling %s on session %s", request.method, session.id
            )
            return jsonrpc_error(request.id, types.INTERNAL_ERROR, "Internal error")
        return jsonrpc_result(request.id, result)

    async def _initialize(self, session: Session, params: Dict[str, Any]) -> Dict[str, Any]:
        requested = params.get("protocolVersion")
        if requested in SUPPORTED_PROTOCOL_VERSIONS:
            protocol_version = requested
        else:
            protocol_version = types.LATEST_PROTOCOL_VERSION

        client_info = params.get("clientInfo")
        if not isinstance(client_info, dict):
            client_info = {}
        logger.info(
            "Session %s initialized by %s (protocol %s)",
            session.id,
            client_info.get("name", "unknown client"),
            protocol_version,
        )
        result = types.InitializeResult(
            protocolVersion=protocol_version,
            capabilities=types.ServerCapabilities(
                tools=types.ToolsCapability(listChanged=False),
            ),
            serverInfo=types.Implementation(
                name=self.server_name,
                version=self.server_version,
            ),
            instructions=self.instructions,
        )
        return result.model_dump(by_alias=True, mode="json", exclude_none=True)

    async def _ping(self, session: Session, params: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    async def _list_tools(self, session: Session, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"tools": self.dispatcher.registry.list_tools()}

    async def _call_tool(self, session: Session, params: Dict[str, Any]) -> Dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise ProtocolError(types.INVALID_PARAMS, "tools/call requires a tool `name`")
        return await self.dispatcher.dispatch(session.id, name, params.get("arguments"))


__all__ = [
    "JSONRPC_VERSION",
    "McpProtocol",
    "ProtocolError",
    "jsonrpc_error",
    "jsonrpc_result",
    "parse_error",
]
