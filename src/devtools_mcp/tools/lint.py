from __future__ import annotations

from typing import Any, Dict, List, Tuple

from devtools_mcp.schema_types import ToolOutcome, success
from devtools_mcp.tool_inputs import LintCodeInput

from .annotations import TOOL_ANNOTATIONS
from .source import has_function_declaration

MISSING_FUNCTION = "Missing function declaration"


def lint_code(params: LintCodeInput) -> ToolOutcome:
    issues: List[str] = []
    if not has_function_declaration(params.code):
        issues.append(MISSING_FUNCTION)
    return success({"language": params.language, "issues": issues})


LINT_TOOLS: List[Tuple[str, Dict[str, Any]]] = [
    (
        "lint_code",
        {
            "description": "Report structural issues in a code snippet; an empty `issues` list means the snippet passed.",
            "response": "LintReport",
            "model": LintCodeInput,
            "handler": lint_code,
            "annotations": TOOL_ANNOTATIONS["lint_code"],
        },
    ),
]

__all__ = ["LINT_TOOLS", "MISSING_FUNCTION", "lint_code"]
