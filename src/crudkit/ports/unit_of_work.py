"""The transaction boundary repositories write through."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger("crudkit.uow")


class UnitOfWork(ABC):
    """
    One transaction spanning any number of repository calls.

    Repositories only flush. Leaving the block commits; leaving it with an
    exception rolls back and lets the exception propagate::

        async with uow:
            record = await repository.create({"name": "Widget"}, uow=uow)
    """

    @abstractmethod
    async def commit(self) -> None: ...

    @abstractmethod
    async def rollback(self) -> None: ...

    async def __aenter__(self) -> UnitOfWork:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if exc_type is None:
            await self.commit()
            return
        logger.debug("Rolling back after %s", exc_type.__name__)
        await self.rollback()
