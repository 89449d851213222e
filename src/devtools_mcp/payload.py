"""Decoding of untrusted JSON payloads.

Payloads arrive from the network and from tool arguments, so decoding goes
through ``orjson`` only. Nothing in this module evaluates input as code.
"""

from __future__ import annotations

from typing import Any

from orjson import JSONDecodeError
from orjson import loads as _json_loads

REASON_EMPTY = "empty"
REASON_NOT_JSON_SHAPED = "not_json_shaped"
REASON_MALFORMED = "malformed"

_STRUCTURAL_OPENERS = ("{", "[")
_BYTE_ORDER_MARK = "\ufeff"


class DecodeError(ValueError):
    """Raised when a payload cannot be turned into a structured value."""

    def __init__(self, message: str, *, reason: str) -> None:
        super().__init__(message)
        self.reason = reason


def decode_payload(text: Any) -> Any:
    """Parse ``text`` as a JSON object or array.

    Accepts ``str`` or UTF-8 ``bytes``. Surrounding whitespace and byte order
    marks are trimmed, and what remains must open with ``{`` or ``[`` before
    the parser is consulted. Scalars, empty input and anything that is not
    text are rejected with :class:`DecodeError`.
    """

    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError("Payload is not valid UTF-8", reason=REASON_MALFORMED) from exc

    if not isinstance(text, str):
        raise DecodeError(
            f"Payload must be text, got {type(text).__name__}",
            reason=REASON_NOT_JSON_SHAPED,
        )

    stripped = text.strip().strip(_BYTE_ORDER_MARK).strip()
    if not stripped:
        raise DecodeError("Empty payload", reason=REASON_EMPTY)

    if not stripped.startswith(_STRUCTURAL_OPENERS):
        raise DecodeError(
            "Payload must be a JSON object or array",
            reason=REASON_NOT_JSON_SHAPED,
        )

    try:
        return _json_loads(stripped)
    except JSONDecodeError as exc:
        raise DecodeError(f"Malformed JSON: {exc}", reason=REASON_MALFORMED) from exc


def try_decode_payload(text: Any) -> Any | None:
    """Collapsed form of :func:`decode_payload` returning ``None`` on rejection."""

    try:
        return decode_payload(text)
    except DecodeError:
        return None


__all__ = [
    "DecodeError",
    "REASON_EMPTY",
    "REASON_MALFORMED",
    "REASON_NOT_JSON_SHAPED",
    "decode_payload",
    "try_decode_payload",
]
