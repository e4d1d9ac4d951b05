"""
BaseCrudService — request intent in, repository calls out.

The service is the seam where a parsed :class:`RequestParser` meets the
values an endpoint always applies (base columns, conditions, relations)::

    service = BaseCrudService(SQLAlchemyCrudRepository(Post))

    async with SQLAlchemyUnitOfWork(session_factory=factory) as uow:
        page = await service.get_all_paginated(
            parser,
            conditions=[("published", "=", True)],
            relations=["author"],
            uow=uow,
        )
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ..ports.query import PaginatedQuery

if TYPE_CHECKING:
    from ..ports.page import Page
    from ..ports.query import Condition
    from ..ports.repository import ICrudRepository
    from ..ports.unit_of_work import UnitOfWork
    from ..requests.parser import RequestParser

logger = logging.getLogger("crudkit.services")

T = TypeVar("T")


def merge_relations(*groups: Iterable[str]) -> tuple[str, ...]:
    """Concatenate relation lists, keeping the first occurrence of each name."""
    return tuple(dict.fromkeys(name for group in groups for name in group))


class BaseCrudService(Generic[T]):
    """
    Generic CRUD service over one :class:`ICrudRepository`.

    Subclass it to add domain operations; the inherited ones only translate
    request intent and delegate to the repository.
    """

    def __init__(self, repository: ICrudRepository[T]) -> None:
        self.repository = repository

    # -- intent merging -----------------------------------------------------

    def query_options(self, parser: RequestParser) -> dict[str, Any]:
        """Map a parsed request onto :class:`PaginatedQuery` fields."""
        return {
            "conditions": tuple(parser.auto_filters),
            "custom_conditions": dict(parser.custom_filters),
            "sorting": parser.auto_sorting,
            "custom_sorting": parser.custom_sorting,
            "relations": tuple(parser.expandable),
            "custom_relations": tuple(parser.custom_expandable),
            "per_page": parser.per_page,
            "page": parser.page,
        }

    def build_query(
        self,
        parser: RequestParser,
        columns: Sequence[str] = ("*",),
        conditions: Sequence[Condition] = (),
        relations: Sequence[str] = (),
        params: Mapping[str, Any] | None = None,
    ) -> PaginatedQuery:
        """
        Merge request intent with base values.

        Request expansions come before base relations (duplicates dropped);
        request filters come before base conditions.
        """
        options = self.query_options(parser)
        options["relations"] = merge_relations(options["relations"], relations)
        options["conditions"] = (*options["conditions"], *conditions)
        return PaginatedQuery(columns=tuple(columns), params=params or {}, **options)

    # -- reads --------------------------------------------------------------

    async def get_all(
        self,
        columns: Sequence[str] = ("*",),
        relations: Sequence[str] = (),
        uow: UnitOfWork | None = None,
    ) -> list[T]:
        return await self.repository.all(columns, relations, uow=uow)

    async def get_all_paginated(
        self,
        parser: RequestParser,
        columns: Sequence[str] = ("*",),
        conditions: Sequence[Condition] = (),
        relations: Sequence[str] = (),
        params: Mapping[str, Any] | None = None,
        uow: UnitOfWork | None = None,
    ) -> Page[T]:
        query = self.build_query(parser, columns, conditions, relations, params)
        logger.debug("Listing with %r", query)
        return await self.repository.get_all_paginated(query, uow=uow)

    async def pluck(
        self,
        column: str,
        key: str | None = None,
        conditions: Sequence[Condition] = (),
        uow: UnitOfWork | None = None,
    ) -> list[Any] | dict[Any, Any]:
        return await self.repository.pluck(column, key, conditions, uow=uow)

    async def find_by_id(
        self,
        model_or_id: T | Any,
        parser: RequestParser | None = None,
        columns: Sequence[str] = ("*",),
        relations: Sequence[str] = (),
        uow: UnitOfWork | None = None,
    ) -> T:
        """
        Load one record.

        With a *parser*, its expansions are loaded alongside *relations* and
        its custom expansions go through the repository's relation hook.
        """
        custom_relations: tuple[str, ...] = ()
        if parser is not None:
            relations = merge_relations(parser.expandable, relations)
            custom_relations = tuple(parser.custom_expandable)
        return await self.repository.find_by_id(
            model_or_id,
            columns=columns,
            relations=relations,
            custom_relations=custom_relations,
            uow=uow,
        )

    # -- writes -------------------------------------------------------------

    async def create(
        self, payload: Mapping[str, Any], uow: UnitOfWork | None = None
    ) -> T:
        return await self.repository.create(payload, uow=uow)

    async def update(
        self,
        model_or_id: T | Any,
        payload: Mapping[str, Any],
        uow: UnitOfWork | None = None,
    ) -> T:
        return await self.repository.update(model_or_id, payload, uow=uow)

    async def delete(self, model_or_id: T | Any, uow: UnitOfWork | None = None) -> bool:
        return await self.repository.delete_by_id(model_or_id, uow=uow)

    async def restore(self, entity_id: Any, uow: UnitOfWork | None = None) -> bool:
        return await self.repository.restore_by_id(entity_id, uow=uow)

    async def permanently_delete(
        self, entity_id: Any, uow: UnitOfWork | None = None
    ) -> bool:
        return await self.repository.permanently_delete_by_id(entity_id, uow=uow)
