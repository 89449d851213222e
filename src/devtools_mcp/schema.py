"""Helpers for constructing MCP-native tool results."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from devtools_mcp.response_formatter import (
    apply_character_limit,
    build_markdown_summary,
    render_content,
)

ContentItem = Mapping[str, Any]
StructuredContent = Mapping[str, Any]


def mcp_result(
    *,
    content: Iterable[ContentItem],
    structured: StructuredContent | None = None,
    is_error: bool = False,
) -> dict[str, Any]:
    """Return a CallToolResult-compatible payload.

    Parameters
    ----------
    content:
        Iterable of MCP content blocks, copied into a list.
    structured:
        Optional machine-readable payload exposed via ``structuredContent``.
    is_error:
        Whether the tool execution failed. Callers put a descriptive human
        message in the first content item when this is ``True``.
    """

    content_list = list(content)
    if not content_list:
        raise ValueError("mcp_result requires at least one content item")

    result: dict[str, Any] = {
        "content": content_list,
        "isError": bool(is_error),
    }

    if structured is not None:
        result["structuredContent"] = dict(structured)

    return result


def text_item(text: str) -> Dict[str, str]:
    return {"type": "text", "text": text}


def success_result(content: Any) -> Dict[str, Any]:
    """Wrap a successful tool ``content`` value into a CallToolResult."""

    items, _ = apply_character_limit([text_item(render_content(content))])
    return mcp_result(
        content=items,
        structured={"success": True, "content": content},
    )


def error_result(
    *,
    message: str,
    code: str,
    details: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    """Wrap a failure into a CallToolResult flagged with ``isError``."""

    structured: Dict[str, Any] = {"success": False, "error": message, "code": code}
    if details:
        structured["details"] = details

    bullets: List[str] = [f"Code: `{code}`"]
    summary = build_markdown_summary(f"Error: {message}", bullets)
    items, _ = apply_character_limit([text_item(summary)])
    return mcp_result(content=items, structured=structured, is_error=True)


__all__ = ["error_result", "mcp_result", "success_result", "text_item"]
