"""
PaginatedQuery — everything the executor needs to run one list query.

The service builds it by merging a :class:`~crudkit.requests.RequestParser`
with caller-supplied base columns, conditions and relations. The
repository consumes it; nothing here touches the database.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

Condition = tuple[str, str, Any]


@dataclass(frozen=True)
class PaginatedQuery:
    """
    Immutable container for one paginated query.

    Attributes:
        columns: Columns to load; ``("*",)`` loads every column.
        conditions: ``(field, operator, value)`` conditions, applied in order.
        relations: Relations to eager-load directly.
        params: Opaque bag handed to the ``customize_query`` hook.
        sorting: Direct sort directive (``"field"`` / ``"-field"``).
        per_page: Page size.
        page: 1-indexed page number.
        custom_conditions: Field -> value map dispatched to condition hooks.
        custom_sorting: Sort directive dispatched to sorting hooks.
        custom_relations: Relations handed to the ``add_custom_relations`` hook.
    """

    columns: tuple[str, ...] = ("*",)
    conditions: tuple[Condition, ...] = ()
    relations: tuple[str, ...] = ()
    params: Mapping[str, Any] = field(default_factory=dict)
    sorting: str | None = None
    per_page: int = 20
    page: int = 1
    custom_conditions: Mapping[str, Any] = field(default_factory=dict)
    custom_sorting: str | None = None
    custom_relations: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.per_page < 1:
            raise ValueError(f"per_page must be positive, got {self.per_page}")
        if self.page < 1:
            raise ValueError(f"page must be positive, got {self.page}")
        for name in ("columns", "conditions", "relations", "custom_relations"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page
