"""ICrudRepository — generic CRUD repository protocol."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from .page import Page
    from .query import Condition, PaginatedQuery
    from .unit_of_work import UnitOfWork

T = TypeVar("T")


@runtime_checkable
class ICrudRepository(Protocol[T]):
    """
    Generic repository over one persisted model.

    Every lookup that identifies a record accepts either its primary key or
    an already loaded instance. An instance is used as given: no columns or
    relations are reloaded for it.

    Soft-delete aware implementations keep three scopes apart: ``find_by_id``
    sees active records, ``find_trashed_by_id`` sees active and trashed,
    ``find_only_trashed_by_id`` sees trashed only.
    """

    async def all(
        self,
        columns: Sequence[str] = ("*",),
        relations: Sequence[str] = (),
        uow: UnitOfWork | None = None,
    ) -> list[T]: ...

    async def get_all_paginated(
        self, query: PaginatedQuery, uow: UnitOfWork | None = None
    ) -> Page[T]: ...

    async def all_trashed(self, uow: UnitOfWork | None = None) -> list[T]: ...

    async def find_by_id(
        self,
        model_or_id: T | Any,
        columns: Sequence[str] = ("*",),
        relations: Sequence[str] = (),
        custom_relations: Sequence[str] = (),
        uow: UnitOfWork | None = None,
    ) -> T: ...

    async def find_trashed_by_id(
        self, entity_id: Any, uow: UnitOfWork | None = None
    ) -> T: ...

    async def find_only_trashed_by_id(
        self, entity_id: Any, uow: UnitOfWork | None = None
    ) -> T: ...

    async def pluck(
        self,
        column: str,
        key: str | None = None,
        conditions: Sequence[Condition] = (),
        uow: UnitOfWork | None = None,
    ) -> list[Any] | dict[Any, Any]: ...

    async def create(
        self, payload: Mapping[str, Any], uow: UnitOfWork | None = None
    ) -> T: ...

    async def update(
        self,
        model_or_id: T | Any,
        payload: Mapping[str, Any],
        uow: UnitOfWork | None = None,
    ) -> T: ...

    async def update_or_create(
        self,
        attributes: Mapping[str, Any],
        payload: Mapping[str, Any] | None = None,
        uow: UnitOfWork | None = None,
    ) -> T: ...

    async def delete_by_id(
        self, model_or_id: T | Any, uow: UnitOfWork | None = None
    ) -> bool: ...

    async def restore_by_id(
        self, entity_id: Any, uow: UnitOfWork | None = None
    ) -> bool: ...

    async def permanently_delete_by_id(
        self, entity_id: Any, uow: UnitOfWork | None = None
    ) -> bool: ...
