"""Tool implementations served by the dev tools server."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from .explain import EXPLAIN_TOOLS
from .lint import LINT_TOOLS
from .requests import REQUEST_TOOLS
from .snippets import SNIPPET_TOOLS
from .testing import TESTING_TOOLS

ALL_TOOLS: List[Tuple[str, Dict[str, Any]]] = [
    *REQUEST_TOOLS,
    *SNIPPET_TOOLS,
    *LINT_TOOLS,
    *TESTING_TOOLS,
    *EXPLAIN_TOOLS,
]

__all__ = ["ALL_TOOLS"]
