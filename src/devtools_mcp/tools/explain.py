from __future__ import annotations

from typing import Any, Dict, List, Tuple

from devtools_mcp.schema_types import ToolOutcome, failure, success
from devtools_mcp.tool_inputs import ExplainCodeInput

from .annotations import TOOL_ANNOTATIONS
from .source import count_lines, function_names


def explain_code(params: ExplainCodeInput) -> ToolOutcome:
    if not params.code.strip():
        return failure("Empty code")

    lines = count_lines(params.code)
    functions = function_names(params.code)
    if functions:
        listed = ", ".join(f"`{name}`" for name in functions)
        summary = f"{lines} non-blank line(s) declaring {len(functions)} function(s): {listed}."
    else:
        summary = f"{lines} non-blank line(s) of top-level code with no function declarations."
    return success({"summary": summary, "lines": lines, "functions": functions})


EXPLAIN_TOOLS: List[Tuple[str, Dict[str, Any]]] = [
    (
        "explain_code",
        {
            "description": "Summarize a code snippet: size and the functions it declares.",
            "response": "Explanation",
            "model": ExplainCodeInput,
            "handler": explain_code,
            "annotations": TOOL_ANNOTATIONS["explain_code"],
        },
    ),
]

__all__ = ["EXPLAIN_TOOLS", "explain_code"]
