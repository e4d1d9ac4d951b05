"""Sort directives: ``"field"`` (ascending) or ``"-field"`` (descending)."""

from __future__ import annotations

from typing import Any

DESC_MARKER = "-"
ASC = "ASC"
DESC = "DESC"


def encode_sort(field: str, *, descending: bool = False) -> str:
    return f"{DESC_MARKER}{field}" if descending else field


def decode_sort(directive: str) -> tuple[str, str]:
    """Split a directive into ``(field, "ASC" | "DESC")``."""
    field = directive.lstrip(DESC_MARKER)
    return field, ASC if field == directive else DESC


def split_sort_param(raw: Any) -> tuple[str | None, bool]:
    """Read a raw ``sort`` parameter into ``(field, has_desc_marker)``."""
    if not isinstance(raw, str):
        return None, False
    value = raw.strip()
    if value.startswith(DESC_MARKER):
        return value[len(DESC_MARKER) :] or None, True
    return value or None, False
