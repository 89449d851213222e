"""Utilities for rendering tool output as human-readable text blocks."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

import orjson

CHARACTER_LIMIT = 25_000

_TRUNCATION_MARKDOWN = (
    "_Note: Output truncated to {limit:,} characters. Narrow the input "
    "to retrieve the remaining data._"
)


def build_markdown_summary(summary: str, details: Sequence[str] | None = None) -> str:
    """Return a Markdown summary block."""

    headline = summary.strip() or "(no summary provided)"
    lines = [f"**Summary:** {headline}"]

    if details:
        for detail in details:
            detail_text = (detail or "").strip()
            if detail_text:
                lines.append(f"- {detail_text}")

    return "\n".join(lines)


def render_content(content: Any) -> str:
    """Render a tool's ``content`` value as text.

    Strings pass through untouched; everything else is pretty-printed JSON.
    Values ``orjson`` cannot serialize fall back to ``repr``.
    """

    if isinstance(content, str):
        return content
    try:
        return orjson.dumps(
            content,
            option=orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS,
        ).decode("utf-8")
    except TypeError:
        return repr(content)


def apply_character_limit(
    items: Sequence[Dict[str, Any]],
    *,
    limit: int = CHARACTER_LIMIT,
) -> Tuple[List[Dict[str, Any]], bool]:
    """Trim text items so their combined length stays within ``limit``.

    Later items are shortened first. When anything is cut, a trailing note is
    appended and the second element of the returned tuple is ``True``.
    """

    processed = [dict(item) for item in items]
    text_items = [item for item in processed if isinstance(item.get("text"), str)]
    total_chars = sum(len(item["text"]) for item in text_items)

    if total_chars <= limit:
        return processed, False

    hint = _TRUNCATION_MARKDOWN.format(limit=limit)
    reduction_needed = total_chars - max(0, limit - len(hint))

    for item in reversed(text_items):
        if reduction_needed <= 0:
            break
        text_value = item["text"]
        remove = min(len(text_value), reduction_needed)
        item["text"] = text_value[: len(text_value) - remove].rstrip()
        reduction_needed -= remove

    processed.append({"type": "text", "text": hint})
    return processed, True


__all__ = [
    "CHARACTER_LIMIT",
    "apply_character_limit",
    "build_markdown_summary",
    "render_content",
]
