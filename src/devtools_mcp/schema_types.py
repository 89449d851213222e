"""Typed response primitives for the dev tools MCP server."""

from __future__ import annotations

from typing import Any, List, Literal, TypedDict, Union

# ----- Error codes ---------------------------------------------------------
ERROR_DECODE = "decode_error"
ERROR_SCHEMA_MISMATCH = "schema_mismatch"
ERROR_UNKNOWN_TOOL = "unknown_tool"
ERROR_SESSION_NOT_FOUND = "session_not_found"
ERROR_HANDLER_FAULT = "handler_fault"
ERROR_TOOL_FAILED = "tool_failed"


# ----- Tool envelopes ------------------------------------------------------
class ToolSuccess(TypedDict):
    success: Literal[True]
    content: Any


class ToolFailure(TypedDict):
    success: Literal[False]
    error: str


ToolOutcome = Union[ToolSuccess, ToolFailure]


class FieldIssue(TypedDict):
    field: str
    message: str
    type: str


class CaseResult(TypedDict):
    name: str
    status: Literal["passed", "failed"]


class RunSummary(TypedDict):
    passed: int
    failed: int
    results: List[CaseResult]


def success(content: Any) -> ToolSuccess:
    return {"success": True, "content": content}


def failure(error: str) -> ToolFailure:
    return {"success": False, "error": error}


__all__ = [
    "FieldIssue",
    "CaseResult",
    "RunSummary",
    "ToolFailure",
    "ToolOutcome",
    "ToolSuccess",
    "failure",
    "success",
    "ERROR_DECODE",
    "ERROR_HANDLER_FAULT",
    "ERROR_SCHEMA_MISMATCH",
    "ERROR_SESSION_NOT_FOUND",
    "ERROR_TOOL_FAILED",
    "ERROR_UNKNOWN_TOOL",
]

