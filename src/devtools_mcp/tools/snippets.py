from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Tuple

from devtools_mcp.schema_types import ToolOutcome, failure, success
from devtools_mcp.tool_inputs import GenerateSnippetInput

from .annotations import TOOL_ANNOTATIONS

_WORD = re.compile(r"[A-Za-z0-9]+")
_MAX_NAME_WORDS = 5


def _words(description: str) -> List[str]:
    words = [word.lower() for word in _WORD.findall(description)][:_MAX_NAME_WORDS]
    if not words or words[0][0].isdigit():
        words.insert(0, "generated")
    return words


def _python(description: str) -> str:
    name = "_".join(_words(description))
    return (
        f"def {name}():\n"
        f'    """{description}"""\n'
        "    raise NotImplementedError\n"
    )


def _javascript(description: str) -> str:
    words = _words(description)
    name = words[0] + "".join(word.capitalize() for word in words[1:])
    return (
        f"function {name}() {{\n"
        f"  // {description}\n"
        "  throw new Error('Not implemented');\n"
        "}\n"
    )


def _typescript(description: str) -> str:
    words = _words(description)
    name = words[0] + "".join(word.capitalize() for word in words[1:])
    return (
        f"export function {name}(): void {{\n"
        f"  // {description}\n"
        "  throw new Error('Not implemented');\n"
        "}\n"
    )


TEMPLATES: Dict[str, Callable[[str], str]] = {
    "python": _python,
    "javascript": _javascript,
    "typescript": _typescript,
}
LANGUAGE_ALIASES = {"py": "python", "js": "javascript", "ts": "typescript"}


def generate_snippet(params: GenerateSnippetInput) -> ToolOutcome:
    language = params.language.strip().lower()
    language = LANGUAGE_ALIASES.get(language, language)
    template = TEMPLATES.get(language)
    if template is None:
        return failure(f"Unsupported language: {params.language}")

    description = " ".join(params.description.split()) or "Generated function"
    return success({"language": language, "snippet": template(description)})


SNIPPET_TOOLS: List[Tuple[str, Dict[str, Any]]] = [
    (
        "generate_snippet",
        {
            "description": "Generate a starter function in the requested language from a short description.",
            "response": "Snippet",
            "model": GenerateSnippetInput,
            "handler": generate_snippet,
            "annotations": TOOL_ANNOTATIONS["generate_snippet"],
            "examples": [
                {"params": {"language": "python", "description": "parse a config file"}},
            ],
        },
    ),
]

__all__ = ["SNIPPET_TOOLS", "TEMPLATES", "generate_snippet"]
