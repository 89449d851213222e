from __future__ import annotations

from typing import Any, Dict, List, Tuple

from devtools_mcp.payload import DecodeError, decode_payload
from devtools_mcp.schema_types import ToolOutcome, failure, success
from devtools_mcp.tool_inputs import HandleRequestInput

from .annotations import TOOL_ANNOTATIONS

# Tool best suited to follow up on a given request intent.
INTENT_ROUTES: Dict[str, str] = {
    "build": "generate_snippet",
    "generate": "generate_snippet",
    "lint": "lint_code",
    "review": "lint_code",
    "test": "run_tests",
    "explain": "explain_code",
}


def _has_intent(data: Dict[str, Any]) -> bool:
    """Containers count as present; only null, false, zero and "" do not."""

    intent = data.get("intent")
    if intent is None or isinstance(intent, (bool, int, float, str)):
        return bool(intent)
    return True


def handle_request(params: HandleRequestInput) -> ToolOutcome:
    """Decode a JSON request payload and suggest the next tool for its intent."""

    if params.payload == "":
        return failure("Empty payload")
    try:
        data: Any = decode_payload(params.payload)
    except DecodeError:
        return failure("Invalid JSON payload")
    if not isinstance(data, dict) or not _has_intent(data):
        return failure("Missing 'intent' field in payload")

    intent = data["intent"]
    next_tool = INTENT_ROUTES.get(intent.lower()) if isinstance(intent, str) else None
    return success({"parsed": data, "next_tool": next_tool})


REQUEST_TOOLS: List[Tuple[str, Dict[str, Any]]] = [
    (
        "handle_request",
        {
            "description": "Handles JSON payloads and decides next steps.",
            "response": "ParsedRequest",
            "model": HandleRequestInput,
            "handler": handle_request,
            "annotations": TOOL_ANNOTATIONS["handle_request"],
            "examples": [
                {"params": {"payload": '{"intent": "build"}'}},
            ],
        },
    ),
]

__all__ = ["INTENT_ROUTES", "REQUEST_TOOLS", "handle_request"]
