"""Ports: the contracts between request parsing, services and persistence."""

from __future__ import annotations

from .page import Page
from .query import PaginatedQuery
from .repository import ICrudRepository
from .unit_of_work import UnitOfWork

__all__ = [
    "ICrudRepository",
    "Page",
    "PaginatedQuery",
    "UnitOfWork",
]
