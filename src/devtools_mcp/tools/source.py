"""Lightweight, regex-based inspection of source text shared by the code tools."""

from __future__ import annotations

import re
from typing import List

# Declaration forms recognised across the supported languages.
_DECLARATION_PATTERNS = (
    re.compile(r"\bfunction\s*\*?\s*(?P<name>[A-Za-z_$][\w$]*)?\s*\("),
    re.compile(r"\b(?:async\s+)?def\s+(?P<name>[A-Za-z_]\w*)\s*\("),
    re.compile(
        r"\b(?:const|let|var)\s+(?P<name>[A-Za-z_$][\w$]*)\s*=\s*(?:async\s*)?"
        r"(?:\([^()]*\)|[A-Za-z_$][\w$]*)\s*=>"
    ),
    re.compile(r"\bfunc\s+(?P<name>[A-Za-z_]\w*)\s*\("),
    re.compile(r"\bfn\s+(?P<name>[A-Za-z_]\w*)\s*[(<]"),
)
_ANONYMOUS_ARROW = re.compile(r"=>")


def has_function_declaration(code: str) -> bool:
    if any(pattern.search(code) for pattern in _DECLARATION_PATTERNS):
        return True
    return bool(_ANONYMOUS_ARROW.search(code))


def function_names(code: str) -> List[str]:
    """Return declared function names in order of first appearance."""

    found: List[tuple[int, str]] = []
    for pattern in _DECLARATION_PATTERNS:
        for match in pattern.finditer(code):
            name = match.group("name")
            if name:
                found.append((match.start(), name))
    found.sort()
    return list(dict.fromkeys(name for _, name in found))


def count_lines(code: str) -> int:
    return len([line for line in code.splitlines() if line.strip()])


__all__ = ["count_lines", "function_names", "has_function_declaration"]
