"""Alert values carried in the aps dictionary."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PlainAlert:
    """Alert given as a single string."""

    text: str

    def to_wire(self) -> str:
        return self.text


@dataclass(frozen=True)
class StructuredAlert:
    """Alert given as a dictionary (title, body, loc-key, ...)."""

    fields: dict[str, Any] = field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        return dict(self.fields)


Alert = PlainAlert | StructuredAlert


def make_alert(value: object) -> Alert | None:
    """
    Wrap a raw alert value in the matching variant.

    Args:
        value: A string or a mapping of alert sub-fields

    Returns:
        PlainAlert or StructuredAlert, or None when value is not a supported type
    """
    if isinstance(value, str):
        return PlainAlert(value)
    if isinstance(value, Mapping):
        return StructuredAlert(dict(value))
    return None
