"""RequestParser — parsed query intent handed from the request to the service."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

Condition = tuple[str, str, Any]


@dataclass(frozen=True)
class RequestParser:
    """
    Immutable outcome of parsing one request's query parameters.

    Attributes:
        auto_filters: ``(field, operator, value)`` conditions inferred from
            validated fields, operator ``"="`` or ``"LIKE"``.
        custom_filters: Raw values of the declared custom filter fields.
        auto_sorting: ``"field"`` / ``"-field"`` for a directly sortable field.
        custom_sorting: Same shape, for a custom sortable field.
        expandable: Relations to eager-load directly.
        custom_expandable: Relations to load through repository hooks.
        per_page: Resolved page size.
        page: Requested 1-indexed page.
    """

    auto_filters: tuple[Condition, ...] = ()
    custom_filters: Mapping[str, Any] = field(default_factory=dict)
    auto_sorting: str | None = None
    custom_sorting: str | None = None
    expandable: tuple[str, ...] = ()
    custom_expandable: tuple[str, ...] = ()
    per_page: int = 20
    page: int = 1
