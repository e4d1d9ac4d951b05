"""
Build and run one paginated list query against a SQLAlchemy model.

``PaginatedQueryExecutor.build`` turns a :class:`PaginatedQuery` into a
``Select`` in a fixed order:

1. select the model (restricted to the requested columns) and eager-load
   the base relations;
2. ``customize_query`` hook;
3. custom conditions, dispatched per field to ``condition_handlers`` with
   ``add_custom_conditions`` as fallback;
4. plain conditions, each resolved on the model's own table;
5. custom sorting (``sorting_handlers`` / ``add_custom_sorting``), else the
   direct sort directive, else no explicit ordering;
6. ``add_custom_relations`` hook for custom-expandable relations.

``execute`` then counts the filtered rows and fetches one page.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, Literal, TypeVar

from sqlalchemy import asc, desc, func, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import load_only, selectinload

from ...ports.page import Page
from ...primitives.exceptions import DataAccessError
from ...requests.sorting import DESC, decode_sort
from .hooks import RepositoryHooks
from .operators import DEFAULT_OPERATOR_REGISTRY

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm.strategy_options import _AbstractLoad

    from ...ports.query import Condition, PaginatedQuery
    from .operators import ConditionOperatorRegistry

logger = logging.getLogger("crudkit.persistence")

T = TypeVar("T")

ALL_COLUMNS = "*"
SOFT_DELETE_COLUMN = "deleted_at"

TrashedScope = Literal["exclude", "include", "only"]


class PaginatedQueryExecutor(Generic[T]):
    """
    Compile and execute paginated queries for one model class.

    Args:
        model: SQLAlchemy mapped class (the "collection").
        hooks: Per-field handlers and fallback hooks; identity by default.
        operators: Condition operator registry; defaults to
            ``DEFAULT_OPERATOR_REGISTRY``.
    """

    def __init__(
        self,
        model: type[T],
        hooks: RepositoryHooks | None = None,
        operators: ConditionOperatorRegistry | None = None,
    ) -> None:
        self.model = model
        self.hooks = hooks or RepositoryHooks()
        self._operators = operators or DEFAULT_OPERATOR_REGISTRY
        mapper = inspect(model)
        self.table_name: str = mapper.local_table.name
        self._columns: dict[str, Any] = {}
        for prop in mapper.column_attrs:
            attr = getattr(model, prop.key)
            self._columns[prop.key] = attr
            self._columns.setdefault(prop.columns[0].name, attr)
        self.soft_deletes = SOFT_DELETE_COLUMN in self._columns

    # -- column / relation resolution ---------------------------------------

    def qualify_columns(
        self, columns: Sequence[str], table_name: str | None = None
    ) -> list[str]:
        """Prefix unqualified column names with the table name."""
        table = table_name or self.table_name
        return [c if "." in c else f"{table}.{c}" for c in columns]

    def column(self, name: str) -> Any:
        """
        Resolve a column on the model's own table.

        Raises:
            ValueError: If the column is unknown or belongs to another table.
        """
        table, _, attr = name.rpartition(".")
        if table and table != self.table_name:
            raise ValueError(
                f"Column {name!r} does not belong to table {self.table_name!r}"
            )
        try:
            return self._columns[attr]
        except KeyError:
            raise ValueError(
                f"Unknown column {attr!r} on table {self.table_name!r}"
            ) from None

    def relation_loader(self, path: str) -> _AbstractLoad:
        """
        Build a ``selectinload`` chain for a dotted relation path.

        Raises:
            ValueError: If a segment is not a relationship.
        """
        current: type[Any] = self.model
        loader: Any = None
        for part in path.split("."):
            relationship = inspect(current).relationships.get(part)
            if relationship is None:
                raise ValueError(
                    f"Unknown relation {part!r} on {current.__name__} "
                    f"(requested {path!r})"
                )
            attr = getattr(current, part)
            loader = selectinload(attr) if loader is None else loader.selectinload(attr)
            current = relationship.mapper.class_
        return loader  # type: ignore[no-any-return]

    # -- statement building -------------------------------------------------

    def base_statement(
        self,
        columns: Sequence[str] = (ALL_COLUMNS,),
        relations: Sequence[str] = (),
        *,
        trashed: TrashedScope = "exclude",
    ) -> Select[Any]:
        """
        ``SELECT`` the model with column restriction and eager loads.

        ``trashed`` selects the soft-delete scope: ``"exclude"`` (active
        only), ``"include"`` (active and trashed) or ``"only"``.
        """
        stmt = select(self.model)
        qualified = self.qualify_columns(columns)
        if not any(c.endswith(f".{ALL_COLUMNS}") for c in qualified):
            stmt = stmt.options(load_only(*(self.column(c) for c in qualified)))
        if relations:
            stmt = stmt.options(*(self.relation_loader(r) for r in relations))
        return self.apply_trashed_scope(stmt, trashed)

    def apply_trashed_scope(
        self, stmt: Select[Any], trashed: TrashedScope
    ) -> Select[Any]:
        if not self.soft_deletes or trashed == "include":
            return stmt
        deleted_at = self._columns[SOFT_DELETE_COLUMN]
        if trashed == "only":
            return stmt.where(deleted_at.is_not(None))
        return stmt.where(deleted_at.is_(None))

    def apply_conditions(
        self, stmt: Select[Any], conditions: Sequence[Condition]
    ) -> Select[Any]:
        for attr, operator, value in conditions:
            stmt = stmt.where(
                self._operators.apply(operator, self.column(attr), value)
            )
        return stmt

    def apply_custom_conditions(
        self, stmt: Select[Any], custom_conditions: Mapping[str, Any]
    ) -> Select[Any]:
        # The fallback sees the whole map once per key without a handler.
        for key, value in custom_conditions.items():
            handler = self.hooks.condition_handlers.get(key)
            if handler is not None:
                stmt = handler(stmt, value)
            else:
                stmt = self.hooks.add_custom_conditions(stmt, custom_conditions)
        return stmt

    def apply_sorting(
        self,
        stmt: Select[Any],
        sorting: str | None,
        custom_sorting: str | None,
    ) -> Select[Any]:
        if custom_sorting:
            attr, direction = decode_sort(custom_sorting)
            handler = self.hooks.sorting_handlers.get(attr)
            if handler is not None:
                return handler(stmt, direction)
            return self.hooks.add_custom_sorting(stmt, attr, direction)
        if sorting:
            attr, direction = decode_sort(sorting)
            col = self.column(attr)
            return stmt.order_by(desc(col) if direction == DESC else asc(col))
        return stmt

    def build(self, query: PaginatedQuery) -> Select[Any]:
        """Compile *query* into an unpaginated ``Select``."""
        stmt = self.base_statement(query.columns, query.relations)
        stmt = self.hooks.customize_query(stmt, query.params)
        stmt = self.apply_custom_conditions(stmt, query.custom_conditions)
        stmt = self.apply_conditions(stmt, query.conditions)
        stmt = self.apply_sorting(stmt, query.sorting, query.custom_sorting)
        if query.custom_relations:
            stmt = self.hooks.add_custom_relations(stmt, query.custom_relations)
        return stmt

    # -- execution ----------------------------------------------------------

    async def execute(self, session: AsyncSession, query: PaginatedQuery) -> Page[T]:
        """Run *query* and return one page of model instances."""
        stmt = self.build(query)
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        logger.debug(
            "Paginating %s (page=%d, per_page=%d)",
            self.table_name,
            query.page,
            query.per_page,
        )
        try:
            total = (await session.execute(count_stmt)).scalar_one()
            result = await session.execute(
                stmt.limit(query.per_page).offset(query.offset)
            )
            items = list(result.scalars().unique().all())
        except SQLAlchemyError as exc:
            logger.warning("Paginated query on %s failed: %s", self.table_name, exc)
            raise DataAccessError(
                f"Paginated query on {self.table_name!r} failed: {exc}"
            ) from exc
        return Page(items=items, total=total, page=query.page, per_page=query.per_page)
