"""Tool registry and the dispatch boundary in front of tool handlers."""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from mcp import types
from mcp.server.fastmcp.utilities.logging import get_logger
from pydantic import BaseModel, ValidationError

from devtools_mcp.schema import error_result, success_result
from devtools_mcp.schema_types import (
    ERROR_HANDLER_FAULT,
    ERROR_SCHEMA_MISMATCH,
    ERROR_TOOL_FAILED,
    ERROR_UNKNOWN_TOOL,
    FieldIssue,
)

logger = get_logger(__name__)

ToolHandler = Callable[[Any], Any]


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: ToolHandler
    input_schema: Mapping[str, Any] = field(repr=False)
    annotations: Mapping[str, Any] = field(default_factory=dict, repr=False)

    def as_mcp_tool(self) -> Dict[str, Any]:
        """Return the ``tools/list`` entry for this tool."""

        tool = types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=dict(self.input_schema),
            annotations=(
                types.ToolAnnotations(**self.annotations) if self.annotations else None
            ),
        )
        return tool.model_dump(by_alias=True, mode="json", exclude_none=True)


class ToolRegistry:
    """Name -> :class:`ToolDescriptor` mapping.

    Registering a name that already exists replaces the previous descriptor;
    the replacement is logged as a warning.
    """

    def __init__(self) -> None:
        self._tools: Dict[str, ToolDescriptor] = {}

    def register(
        self,
        name: str,
        description: str,
        input_model: Type[BaseModel],
        handler: ToolHandler,
        *,
        annotations: Optional[Mapping[str, Any]] = None,
    ) -> ToolDescriptor:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Tool name must be a non-empty string")
        if not callable(handler):
            raise TypeError(f"Handler for tool {name!r} is not callable")

        descriptor = ToolDescriptor(
            name=name,
            description=description,
            input_model=input_model,
            handler=handler,
            input_schema=MappingProxyType(input_model.model_json_schema()),
            annotations=MappingProxyType(dict(annotations or {})),
        )
        if name in self._tools:
            logger.warning("Replacing existing registration for tool %s", name)
        self._tools[name] = descriptor
        return descriptor

    def tool(
        self,
        name: str,
        description: str,
        input_model: Type[BaseModel],
        *,
        annotations: Optional[Mapping[str, Any]] = None,
    ) -> Callable[[ToolHandler], ToolHandler]:
        """Decorator form of :meth:`register`."""

        def decorator(func: ToolHandler) -> ToolHandler:
            self.register(name, description, input_model, func, annotations=annotations)
            return func

        return decorator

    def get(self, name: str) -> Optional[ToolDescriptor]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools)

    def list_tools(self) -> List[Dict[str, Any]]:
        return [descriptor.as_mcp_tool() for descriptor in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self):
        return iter(self._tools.values())


class DispatchError(Exception):
    """Internal control-flow exception carrying an error code for the caller."""

    code = ERROR_TOOL_FAILED

    def __init__(self, message: str, *, details: Dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_result(self) -> Dict[str, Any]:
        return error_result(message=self.message, code=self.code, details=self.details)


class UnknownToolError(DispatchError):
    code = ERROR_UNKNOWN_TOOL


class SchemaMismatchError(DispatchError):
    code = ERROR_SCHEMA_MISMATCH


class HandlerFaultError(DispatchError):
    code = ERROR_HANDLER_FAULT


def _field_issues(exc: ValidationError) -> List[FieldIssue]:
    issues: List[FieldIssue] = []
    for error in exc.errors(include_url=False):
        location = ".".join(str(part) for part in error.get("loc", ())) or "(root)"
        issues.append(
            {"field": location, "message": error.get("msg", ""), "type": error.get("type", "")}
        )
    return issues


def _normalize_outcome(value: Any) -> Dict[str, Any]:
    """Coerce whatever a handler returned into the success/error envelope."""

    if isinstance(value, dict):
        if isinstance(value.get("success"), bool):
            if value["success"]:
                return {"success": True, "content": value.get("content")}
            return {"success": False, "error": str(value.get("error") or "Tool failed")}
        if set(value) == {"error"}:
            return {"success": False, "error": str(value["error"])}
    return {"success": True, "content": value}


class Dispatcher:
    """Validate a request against the registry and invoke the matching handler.

    The dispatcher keeps no per-call state; :meth:`dispatch` always returns a
    CallToolResult-compatible dict and never raises.
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self.registry = registry

    def resolve(self, tool_name: Any) -> ToolDescriptor:
        descriptor = self.registry.get(tool_name) if isinstance(tool_name, str) else None
        if descriptor is None:
            raise UnknownToolError(
                f"Unknown tool: {tool_name}",
                details={"tool": tool_name, "available": self.registry.names()},
            )
        return descriptor

    def validate(self, descriptor: ToolDescriptor, arguments: Any) -> BaseModel:
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise SchemaMismatchError(
                f"Arguments for {descriptor.name} must be an object",
                details={"tool": descriptor.name, "received": type(arguments).__name__},
            )
        try:
            return descriptor.input_model.model_validate(arguments)
        except ValidationError as exc:
            raise SchemaMismatchError(
                f"Invalid arguments for {descriptor.name}",
                details={"tool": descriptor.name, "issues": _field_issues(exc)},
            ) from exc

    async def invoke(
        self, descriptor: ToolDescriptor, params: BaseModel, *, session_id: str | None = None
    ) -> Dict[str, Any]:
        try:
            value = descriptor.handler(params)
            if inspect.isawaitable(value):
                value = await value
        except Exception as exc:
            logger.exception(
                "Tool %s raised while serving session %s", descriptor.name, session_id
            )
            raise HandlerFaultError(
                f"Tool {descriptor.name} failed: {exc}",
                details={"tool": descriptor.name, "exception": type(exc).__name__},
            ) from exc
        return _normalize_outcome(value)

    async def dispatch(
        self, session_id: str | None, tool_name: Any, arguments: Any
    ) -> Dict[str, Any]:
        try:
            descriptor = self.resolve(tool_name)
            params = self.validate(descriptor, arguments)
            outcome = await self.invoke(descriptor, params, session_id=session_id)
        except DispatchError as exc:
            logger.info(
                "Dispatch of %s for session %s rejected: %s", tool_name, session_id, exc.code
            )
            return exc.to_result()

        if outcome["success"]:
            return success_result(outcome["content"])
        return error_result(message=outcome["error"], code=ERROR_TOOL_FAILED)


__all__ = [
    "DispatchError",
    "Dispatcher",
    "HandlerFaultError",
    "SchemaMismatchError",
    "ToolDescriptor",
    "ToolHandler",
    "ToolRegistry",
    "UnknownToolError",
]
