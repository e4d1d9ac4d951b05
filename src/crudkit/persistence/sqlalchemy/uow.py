"""AsyncSession-backed unit of work."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from ...ports.unit_of_work import UnitOfWork
from ...primitives.exceptions import SessionManagementError, UnitOfWorkError

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger("crudkit.uow")


class SQLAlchemyUnitOfWork(UnitOfWork):
    """
    Wraps one ``AsyncSession`` transaction.

    Pass either a ``session`` the caller keeps ownership of (for instance
    one injected per web request) or a ``session_factory``; a session
    opened from the factory is closed again when the block exits::

        factory = async_sessionmaker(engine, expire_on_commit=False)
        async with SQLAlchemyUnitOfWork(session_factory=factory) as uow:
            await service.create(payload, uow=uow)
    """

    def __init__(
        self,
        session: AsyncSession | None = None,
        *,
        session_factory: Callable[[], AsyncSession] | None = None,
    ) -> None:
        if (session is None) == (session_factory is None):
            raise SessionManagementError(
                "Pass exactly one of 'session' or 'session_factory'."
            )
        self._session = session
        self._session_factory = session_factory

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise UnitOfWorkError("No active session; enter the unit of work first.")
        return self._session

    async def __aenter__(self) -> SQLAlchemyUnitOfWork:
        if self._session_factory is not None:
            self._session = self._session_factory()
        if not self.session.in_transaction():
            await self.session.begin()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        try:
            await super().__aexit__(exc_type, exc_val, exc_tb)
        finally:
            if self._session_factory is not None and self._session is not None:
                await self._session.close()
                self._session = None

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            logger.warning("Commit failed, rolling back: %s", exc)
            await self.rollback()
            raise UnitOfWorkError(f"Commit failed: {exc}") from exc

    async def rollback(self) -> None:
        if self.session.in_transaction():
            await self.session.rollback()
