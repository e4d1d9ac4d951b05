"""PerPageParser — page size and page number from query params."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def _to_int(value: Any) -> int:
    """Lenient integer cast: anything unreadable counts as ``0``."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        pass
    try:
        return int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return 0


class PerPageParser:
    """Resolve ``per-page`` and ``page`` without ever raising."""

    def parse_per_page(
        self,
        query_params: Mapping[str, Any],
        *,
        default: int,
        maximum: int,
        local_default: int = 0,
        per_page_key: str = "per-page",
    ) -> int:
        """
        Return the effective page size.

        Values below 1 use ``local_default`` (when set) or ``default``.
        Values above ``maximum`` use ``default``; they are not clamped to
        ``maximum``.
        """
        per_page = _to_int(query_params.get(per_page_key))
        if per_page < 1:
            return local_default or default
        return default if per_page > maximum else per_page

    def parse_page(
        self,
        query_params: Mapping[str, Any],
        *,
        page_key: str = "page",
    ) -> int:
        return max(1, _to_int(query_params.get(page_key)))
