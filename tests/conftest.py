"""Shared models and database fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from crudkit.config import CrudSettings, get_settings
from crudkit.persistence.sqlalchemy import SQLAlchemyUnitOfWork

from .models import Author, Base, Comment, Post, enable_foreign_keys

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings() -> CrudSettings:
    return CrudSettings(items_count_per_page=20, max_items_count_per_page=100)


@pytest.fixture()
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    event.listen(engine.sync_engine, "connect", enable_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture()
async def uow(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[SQLAlchemyUnitOfWork, None]:
    async with SQLAlchemyUnitOfWork(session_factory=session_factory) as uow:
        yield uow


@pytest.fixture()
async def seeded(session_factory: async_sessionmaker[AsyncSession]) -> dict[str, Any]:
    """Two authors, five posts, three comments; committed."""
    async with session_factory() as session, session.begin():
        ada = Author(id=1, name="Ada", email="ada@example.com")
        bob = Author(id=2, name="Bob", email=None)
        session.add_all([ada, bob])
        session.add_all(
            [
                Post(id=1, title="Intro to SQL", price=30, published=True, author=ada),
                Post(id=2, title="Advanced SQL", price=50, published=True, author=ada),
                Post(id=3, title="Cooking", price=10, published=False, author=bob),
                Post(id=4, title="Gardening", price=20, published=True, author=bob),
                Post(id=5, title="Poetry", price=40, published=False, author=bob),
            ]
        )
        await session.flush()
        session.add_all(
            [
                Comment(id=1, body="Great", post_id=1),
                Comment(id=2, body="Thanks", post_id=1),
                Comment(id=3, body="Tasty", post_id=3),
            ]
        )
    return {"authors": [1, 2], "posts": [1, 2, 3, 4, 5]}
