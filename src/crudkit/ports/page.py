"""
Page — one page of records plus length-aware pagination metadata.

Returned by every paginated repository/service call::

    page = await service.get_all_paginated(parser)
    page.items, page.total, page.page, page.last_page
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """
    Immutable page of results.

    Attributes:
        items: Records on this page (at most ``per_page``).
        total: Number of matching records across all pages.
        page: 1-indexed page number.
        per_page: Page size used for the query.
    """

    items: list[T]
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        return max(math.ceil(self.total / self.per_page), 1)

    @property
    def has_more_pages(self) -> bool:
        return self.page < self.last_page

    @property
    def first_item(self) -> int | None:
        """1-based position of the first record on this page."""
        if not self.items:
            return None
        return (self.page - 1) * self.per_page + 1

    @property
    def last_item(self) -> int | None:
        first = self.first_item
        return None if first is None else first + len(self.items) - 1

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self, serialise: Callable[[T], Any] | None = None) -> dict[str, Any]:
        """Serialise to a JSON-compatible dictionary."""
        data = [serialise(item) for item in self.items] if serialise else self.items
        return {
            "data": data,
            "meta": {
                "total": self.total,
                "per_page": self.per_page,
                "current_page": self.page,
                "last_page": self.last_page,
                "from": self.first_item,
                "to": self.last_item,
            },
        }
