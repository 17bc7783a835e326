"""Device token helpers for push notification recipients."""

from __future__ import annotations

import re

DEVICE_TOKEN_PATTERN = re.compile(r"^[a-f0-9]{64}$", re.IGNORECASE)


def validate_token_format(token: object) -> bool:
    """
    Validate APNs token format.

    Args:
        token: Device token to validate

    Returns:
        True if token is a string of 64 hexadecimal characters, False otherwise
    """
    if not isinstance(token, str):
        return False
    # fullmatch: "$" alone would accept a trailing newline
    return DEVICE_TOKEN_PATTERN.fullmatch(token) is not None


def mask_token(token: object) -> str:
    """Return a log-safe form of a token (last 6 characters only)."""
    text = str(token)
    if len(text) <= 6:
        return "..."
    return f"...{text[-6:]}"
