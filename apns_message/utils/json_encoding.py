"""
JSON helpers for size-bounded payload encoding.

Payload sizes are counted in UTF-8 bytes, so documents are always written
with literal non-ASCII characters (ensure_ascii=False). An escaped form
like \\u00e9 would count 6 bytes for a 2-byte character.
"""

from __future__ import annotations

import json
from typing import Any


def encode_compact(document: Any) -> str:
    """
    Serialize a document as compact JSON with literal UTF-8 characters.

    Args:
        document: JSON-representable value

    Returns:
        JSON text without insignificant whitespace

    Raises:
        TypeError: If the document contains a value JSON can not represent
        ValueError: If the document contains NaN/Infinity or a circular reference
    """
    return json.dumps(document, ensure_ascii=False, separators=(",", ":"), allow_nan=False)


def normalize_empty_namespace(payload: str, namespace: str) -> str:
    """Rewrite a leading empty-array namespace value to an empty object."""
    array_form = '{"%s":[]' % namespace
    if payload.startswith(array_form):
        return '{"%s":{}' % namespace + payload[len(array_form):]
    return payload


def byte_length(text: str) -> int:
    """Length of text once encoded as UTF-8."""
    return len(text.encode("utf-8"))


def truncate_utf8(text: str, max_bytes: int) -> str:
    """
    Return the longest prefix of text whose UTF-8 encoding fits in max_bytes.

    Cuts on character boundaries only; a multi-byte character that would be
    split is dropped entirely.
    """
    if max_bytes <= 0:
        return ""
    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text
    # a cut inside a multi-byte sequence leaves only a trailing partial character
    return encoded[:max_bytes].decode("utf-8", errors="ignore")
