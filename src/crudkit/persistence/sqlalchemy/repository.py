"""
SQLAlchemyCrudRepository: the CRUD repository contract over one mapped class.

Hard deletes are issued as plain ``DELETE`` statements so that rows still
referencing the record make the database refuse, whatever cascade the
relationships declare. Such refusals surface as :class:`ForbiddenError`.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast

from sqlalchemy import delete, inspect, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ...ports.repository import ICrudRepository
from ...primitives.exceptions import (
    DataAccessError,
    EntityNotFoundError,
    ForbiddenError,
    SoftDeleteNotSupportedError,
)
from .executor import ALL_COLUMNS, SOFT_DELETE_COLUMN, PaginatedQueryExecutor
from .mixins import utcnow
from .uow import SQLAlchemyUnitOfWork

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from ...ports.page import Page
    from ...ports.query import Condition, PaginatedQuery
    from ...ports.unit_of_work import UnitOfWork
    from .executor import TrashedScope
    from .hooks import RepositoryHooks
    from .operators import ConditionOperatorRegistry

logger = logging.getLogger("crudkit.persistence")

T = TypeVar("T")
UnitOfWorkFactory = Callable[[], SQLAlchemyUnitOfWork]


class SQLAlchemyCrudRepository(ICrudRepository[T], Generic[T]):
    """
    Implementation of ICrudRepository using SQLAlchemy.

    List queries go through a :class:`PaginatedQueryExecutor`; per-field
    behaviour (custom filters, custom sorting, custom relations) is injected
    with a :class:`RepositoryHooks` bundle rather than by subclassing::

        hooks = RepositoryHooks()

        @hooks.on_condition("tag")
        def _by_tag(stmt, value):
            return stmt.join(Post.tags).where(Tag.name == value)

        posts = SQLAlchemyCrudRepository(Post, uow_factory=factory, hooks=hooks)

    Mutations only flush: the unit of work owns commit / rollback.
    Models with a ``deleted_at`` column (see :class:`SoftDeleteModelMixin`)
    are soft-deleted; the default scope then hides trashed rows.

    Supports two UoW patterns:

    1. **Per-call UoW** (recommended):
       ``await repo.create(payload, uow=uow)``

    2. **Factory-injected UoW**:
       ``SQLAlchemyCrudRepository(Post, uow_factory=factory)``
    """

    def __init__(
        self,
        model: type[T],
        uow_factory: UnitOfWorkFactory | None = None,
        *,
        hooks: RepositoryHooks | None = None,
        operators: ConditionOperatorRegistry | None = None,
    ) -> None:
        self.model = model
        self._uow_factory = uow_factory
        self._executor: PaginatedQueryExecutor[T] = PaginatedQueryExecutor(
            model, hooks=hooks, operators=operators
        )
        mapper = inspect(model)
        self._mapper = mapper
        self._primary_key = mapper.primary_key[0]
        self._attributes = set(mapper.attrs.keys())

    @property
    def hooks(self) -> RepositoryHooks:
        return self._executor.hooks

    @property
    def executor(self) -> PaginatedQueryExecutor[T]:
        return self._executor

    @property
    def soft_deletes(self) -> bool:
        return self._executor.soft_deletes

    # -- UoW helpers --------------------------------------------------------

    def _get_active_uow(
        self, uow: UnitOfWork | None = None
    ) -> SQLAlchemyUnitOfWork | None:
        if uow is not None:
            return cast("SQLAlchemyUnitOfWork", uow)
        if self._uow_factory is not None:
            return self._uow_factory()
        return None

    def _session(self, uow: UnitOfWork | None = None) -> AsyncSession:
        active = self._get_active_uow(uow)
        if active is None:
            raise ValueError("No UnitOfWork provided or configured.")
        return active.session

    # -- internal helpers ---------------------------------------------------

    @contextlib.contextmanager
    def _store_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            logger.warning("%s on %s failed: %s", action, self.model.__name__, exc)
            raise DataAccessError(
                f"{action} on {self.model.__name__} failed: {exc}"
            ) from exc

    def _require_soft_deletes(self) -> None:
        if not self.soft_deletes:
            raise SoftDeleteNotSupportedError(self.model.__name__)

    def _check_payload(self, payload: Mapping[str, Any]) -> None:
        unknown = sorted(set(payload) - self._attributes)
        if unknown:
            raise ValueError(
                f"Unknown attributes for {self.model.__name__}: {', '.join(unknown)}"
            )

    async def _first_or_fail(
        self, session: AsyncSession, stmt: Select[Any], entity_id: Any
    ) -> T:
        with self._store_errors("find"):
            result = await session.execute(stmt)
            model = result.scalars().first()
        if model is None:
            raise EntityNotFoundError(self.model.__name__, entity_id)
        return cast("T", model)

    async def _find(
        self,
        entity_id: Any,
        trashed: TrashedScope,
        uow: UnitOfWork | None,
    ) -> T:
        stmt = self._executor.base_statement(trashed=trashed)
        stmt = stmt.where(self._primary_key == entity_id)
        return await self._first_or_fail(self._session(uow), stmt, entity_id)

    async def _purge(self, session: AsyncSession, model: T, action: str) -> None:
        """Remove the row with a plain ``DELETE`` and detach the instance.

        Relationship cascades are bypassed: referencing rows are neither
        deleted nor nulled out, so foreign keys decide.
        """
        table = self._mapper.local_table
        stmt = delete(table).where(self._primary_key == self._identity(model))
        with self._store_errors(action):
            await session.flush()
            try:
                await session.execute(stmt)
            except IntegrityError as exc:
                logger.info(
                    "%s on %s blocked by integrity constraint: %s",
                    action,
                    self.model.__name__,
                    exc.orig,
                )
                raise ForbiddenError() from exc
        session.expunge(model)

    def _set_trashed(self, model: T, trashed: bool) -> None:
        mark = getattr(model, "mark_trashed" if trashed else "mark_restored", None)
        if callable(mark):
            mark()
        else:
            setattr(model, SOFT_DELETE_COLUMN, utcnow() if trashed else None)

    # -- reads --------------------------------------------------------------

    async def all(
        self,
        columns: Sequence[str] = (ALL_COLUMNS,),
        relations: Sequence[str] = (),
        uow: UnitOfWork | None = None,
    ) -> list[T]:
        stmt = self._executor.base_statement(columns, relations)
        with self._store_errors("all"):
            result = await self._session(uow).execute(stmt)
            return list(result.scalars().all())

    async def get_all_paginated(
        self, query: PaginatedQuery, uow: UnitOfWork | None = None
    ) -> Page[T]:
        return await self._executor.execute(self._session(uow), query)

    async def all_trashed(self, uow: UnitOfWork | None = None) -> list[T]:
        self._require_soft_deletes()
        stmt = self._executor.base_statement(trashed="only")
        with self._store_errors("all_trashed"):
            result = await self._session(uow).execute(stmt)
            return list(result.scalars().all())

    async def find_by_id(
        self,
        model_or_id: T | Any,
        columns: Sequence[str] = (ALL_COLUMNS,),
        relations: Sequence[str] = (),
        custom_relations: Sequence[str] = (),
        uow: UnitOfWork | None = None,
    ) -> T:
        """
        Return the active record with this primary key.

        An instance of the model is returned as given: columns and relations
        are not reloaded for it.

        Raises:
            EntityNotFoundError: No active record has this key.
        """
        if isinstance(model_or_id, self.model):
            return model_or_id
        stmt = self._executor.base_statement(columns, relations)
        stmt = stmt.where(self._primary_key == model_or_id)
        if custom_relations:
            stmt = self.hooks.add_custom_relations(stmt, custom_relations)
        return await self._first_or_fail(self._session(uow), stmt, model_or_id)

    async def find_trashed_by_id(
        self, entity_id: Any, uow: UnitOfWork | None = None
    ) -> T:
        """Return the record whether active or trashed."""
        self._require_soft_deletes()
        return await self._find(entity_id, "include", uow)

    async def find_only_trashed_by_id(
        self, entity_id: Any, uow: UnitOfWork | None = None
    ) -> T:
        self._require_soft_deletes()
        return await self._find(entity_id, "only", uow)

    async def pluck(
        self,
        column: str,
        key: str | None = None,
        conditions: Sequence[Condition] = (),
        uow: UnitOfWork | None = None,
    ) -> list[Any] | dict[Any, Any]:
        """
        Project a single column of the active records.

        With ``key`` the result is a ``{key_value: column_value}`` dict.
        """
        cols = [self._executor.column(column)]
        if key is not None:
            cols.append(self._executor.column(key))
        stmt = self._executor.apply_trashed_scope(select(*cols), "exclude")
        stmt = self._executor.apply_conditions(stmt, conditions)
        with self._store_errors("pluck"):
            rows = (await self._session(uow).execute(stmt)).all()
        if key is not None:
            return {row[1]: row[0] for row in rows}
        return [row[0] for row in rows]

    # -- writes -------------------------------------------------------------

    async def create(
        self, payload: Mapping[str, Any], uow: UnitOfWork | None = None
    ) -> T:
        self._check_payload(payload)
        session = self._session(uow)
        model = self.model(**payload)
        with self._store_errors("create"):
            session.add(model)
            await session.flush()
            await session.refresh(model)
        logger.info("Created %s id=%r", self.model.__name__, self._identity(model))
        return model

    async def update(
        self,
        model_or_id: T | Any,
        payload: Mapping[str, Any],
        uow: UnitOfWork | None = None,
    ) -> T:
        self._check_payload(payload)
        model = await self.find_by_id(model_or_id, uow=uow)
        for attr, value in payload.items():
            setattr(model, attr, value)
        with self._store_errors("update"):
            await self._session(uow).flush()
        logger.info("Updated %s id=%r", self.model.__name__, self._identity(model))
        return model

    async def update_or_create(
        self,
        attributes: Mapping[str, Any],
        payload: Mapping[str, Any] | None = None,
        uow: UnitOfWork | None = None,
    ) -> T:
        """Update the first record matching *attributes*, or create one."""
        payload = payload or {}
        self._check_payload({**attributes, **payload})
        stmt = self._executor.base_statement(trashed="include")
        stmt = self._executor.apply_conditions(
            stmt, [(attr, "=", value) for attr, value in attributes.items()]
        )
        with self._store_errors("update_or_create"):
            existing = (await self._session(uow).execute(stmt)).scalars().first()
        if existing is None:
            return await self.create({**attributes, **payload}, uow=uow)
        return await self.update(existing, payload, uow=uow)

    async def delete_by_id(
        self, model_or_id: T | Any, uow: UnitOfWork | None = None
    ) -> bool:
        """
        Delete the record: trash it when soft-deletable, remove it otherwise.

        Raises:
            EntityNotFoundError: No active record has this key.
            ForbiddenError: Other records still reference it.
        """
        model = await self.find_by_id(model_or_id, uow=uow)
        session = self._session(uow)
        entity_id = self._identity(model)
        if self.soft_deletes:
            self._set_trashed(model, True)
            with self._store_errors("delete"):
                await session.flush()
        else:
            await self._purge(session, model, "delete")
        logger.info("Deleted %s id=%r", self.model.__name__, entity_id)
        return True

    async def restore_by_id(self, entity_id: Any, uow: UnitOfWork | None = None) -> bool:
        model = await self.find_only_trashed_by_id(entity_id, uow=uow)
        self._set_trashed(model, False)
        with self._store_errors("restore"):
            await self._session(uow).flush()
        logger.info("Restored %s id=%r", self.model.__name__, entity_id)
        return True

    async def permanently_delete_by_id(
        self, entity_id: Any, uow: UnitOfWork | None = None
    ) -> bool:
        model = await self.find_trashed_by_id(entity_id, uow=uow)
        await self._purge(self._session(uow), model, "permanently_delete")
        logger.info("Permanently deleted %s id=%r", self.model.__name__, entity_id)
        return True

    def _identity(self, model: Any) -> Any:
        return self._mapper.primary_key_from_instance(model)[0]
