from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from crudkit.persistence.sqlalchemy import SQLAlchemyUnitOfWork
from crudkit.ports import UnitOfWork
from crudkit.primitives.exceptions import SessionManagementError, UnitOfWorkError


def _session(*, in_transaction: bool = False) -> AsyncMock:
    session = AsyncMock(spec=AsyncSession)
    session.in_transaction.return_value = in_transaction
    session.begin = AsyncMock()
    return session


def test_uow_requires_exactly_one_session_source() -> None:
    with pytest.raises(SessionManagementError, match="exactly one"):
        SQLAlchemyUnitOfWork(session=_session(), session_factory=_session)
    with pytest.raises(SessionManagementError, match="exactly one"):
        SQLAlchemyUnitOfWork()


def test_session_before_enter_raises() -> None:
    uow = SQLAlchemyUnitOfWork(session_factory=_session)

    with pytest.raises(UnitOfWorkError, match="No active session"):
        _ = uow.session


def test_unit_of_work_has_no_commit_callbacks() -> None:
    assert not hasattr(UnitOfWork, "on_commit")
    assert not hasattr(SQLAlchemyUnitOfWork, "trigger_commit_hooks")


@pytest.mark.asyncio()
async def test_begins_and_commits_on_success() -> None:
    session = _session()

    async with SQLAlchemyUnitOfWork(session=session):
        pass

    session.begin.assert_awaited_once()
    session.commit.assert_awaited_once()
    session.rollback.assert_not_awaited()


@pytest.mark.asyncio()
async def test_existing_transaction_is_reused() -> None:
    session = _session(in_transaction=True)

    async with SQLAlchemyUnitOfWork(session=session):
        pass

    session.begin.assert_not_awaited()
    session.commit.assert_awaited_once()


@pytest.mark.asyncio()
async def test_rollback_on_exception(caplog) -> None:
    caplog.set_level("DEBUG", logger="crudkit.uow")
    session = _session(in_transaction=True)

    with pytest.raises(RuntimeError, match="boom"):
        async with SQLAlchemyUnitOfWork(session=session):
            raise RuntimeError("boom")

    session.rollback.assert_awaited_once()
    session.commit.assert_not_awaited()
    assert "Rolling back after RuntimeError" in caplog.text


@pytest.mark.asyncio()
async def test_commit_failure_is_wrapped_and_rolled_back() -> None:
    session = _session(in_transaction=True)
    session.commit.side_effect = SQLAlchemyError("disk full")

    with pytest.raises(UnitOfWorkError, match="Commit failed: disk full"):
        async with SQLAlchemyUnitOfWork(session=session):
            pass

    session.rollback.assert_awaited_once()


@pytest.mark.asyncio()
async def test_owned_session_is_closed() -> None:
    session = _session()
    uow = SQLAlchemyUnitOfWork(session_factory=lambda: session)

    async with uow:
        assert uow.session is session

    session.close.assert_awaited_once()
    with pytest.raises(UnitOfWorkError):
        _ = uow.session


@pytest.mark.asyncio()
async def test_owned_session_is_closed_after_rollback() -> None:
    session = _session(in_transaction=True)
    uow = SQLAlchemyUnitOfWork(session_factory=lambda: session)

    with pytest.raises(ValueError):
        async with uow:
            raise ValueError("bad input")

    session.rollback.assert_awaited_once()
    session.close.assert_awaited_once()


@pytest.mark.asyncio()
async def test_caller_session_is_left_open() -> None:
    session = _session()

    async with SQLAlchemyUnitOfWork(session=session):
        pass

    session.close.assert_not_awaited()
