from __future__ import annotations

from typing import Any, Dict

TOOL_ANNOTATIONS: Dict[str, Dict[str, Any]] = {
    "handle_request": {
        "title": "Route JSON Request",
        "readOnlyHint": True,
        "idempotentHint": True,
        "destructiveHint": False,
        "openWorldHint": False,
    },
    "generate_snippet": {
        "title": "Generate Code Snippet",
        "readOnlyHint": True,
        "idempotentHint": True,
        "destructiveHint": False,
        "openWorldHint": False,
    },
    "lint_code": {
        "title": "Lint Source Code",
        "readOnlyHint": True,
        "idempotentHint": True,
        "destructiveHint": False,
        "openWorldHint": False,
    },
    "run_tests": {
        "title": "Run Mock Tests",
        "readOnlyHint": True,
        "idempotentHint": True,
        "destructiveHint": False,
        "openWorldHint": False,
    },
    "explain_code": {
        "title": "Explain Source Code",
        "readOnlyHint": True,
        "idempotentHint": True,
        "destructiveHint": False,
        "openWorldHint": False,
    },
}

__all__ = ["TOOL_ANNOTATIONS"]
