"""BaseCrudService: merging request intent with base values."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from crudkit.persistence.sqlalchemy import SQLAlchemyCrudRepository
from crudkit.ports import ICrudRepository, PaginatedQuery
from crudkit.requests import QueryIntentBuilder, RequestDeclaration, RequestParser
from crudkit.services import BaseCrudService, merge_relations

from .models import Post


def _service() -> tuple[BaseCrudService[Any], Any]:
    repository = MagicMock(spec=ICrudRepository)
    for name in (
        "all",
        "get_all_paginated",
        "pluck",
        "find_by_id",
        "create",
        "update",
        "delete_by_id",
        "restore_by_id",
        "permanently_delete_by_id",
    ):
        setattr(repository, name, AsyncMock(name=name))
    return BaseCrudService(repository), repository


def test_merge_relations_keeps_first_occurrence() -> None:
    assert merge_relations(["author", "comments"], ["comments", "tags"]) == (
        "author",
        "comments",
        "tags",
    )


def test_build_query_merges_intent_and_base_values() -> None:
    service, _ = _service()
    parser = RequestParser(
        auto_filters=(("title", "LIKE", "%a%"),),
        custom_filters={"tag": "db"},
        auto_sorting="-price",
        expandable=("author", "comments"),
        custom_expandable=("stats",),
        per_page=5,
        page=2,
    )

    query = service.build_query(
        parser,
        columns=["id", "title"],
        conditions=[("published", "=", True)],
        relations=["comments", "tags"],
        params={"scope": "public"},
    )

    assert query == PaginatedQuery(
        columns=("id", "title"),
        conditions=(("title", "LIKE", "%a%"), ("published", "=", True)),
        relations=("author", "comments", "tags"),
        params={"scope": "public"},
        sorting="-price",
        per_page=5,
        page=2,
        custom_conditions={"tag": "db"},
        custom_sorting=None,
        custom_relations=("stats",),
    )


def test_query_options_mirror_parser_fields() -> None:
    service, _ = _service()
    options = service.query_options(RequestParser(custom_sorting="name", per_page=9))

    assert options["custom_sorting"] == "name"
    assert options["sorting"] is None
    assert options["per_page"] == 9
    assert options["page"] == 1


@pytest.mark.asyncio()
async def test_get_all_paginated_hands_query_to_repository() -> None:
    service, repository = _service()
    uow = object()

    await service.get_all_paginated(RequestParser(per_page=3), uow=uow)

    query = repository.get_all_paginated.await_args.args[0]
    assert query.per_page == 3
    assert repository.get_all_paginated.await_args.kwargs == {"uow": uow}


@pytest.mark.asyncio()
async def test_find_by_id_merges_parser_expansions() -> None:
    service, repository = _service()
    parser = RequestParser(expandable=("author",), custom_expandable=("stats",))

    await service.find_by_id(7, parser, relations=["comments", "author"])

    repository.find_by_id.assert_awaited_once_with(
        7,
        columns=("*",),
        relations=("author", "comments"),
        custom_relations=("stats",),
        uow=None,
    )


@pytest.mark.asyncio()
async def test_find_by_id_without_parser() -> None:
    service, repository = _service()

    await service.find_by_id(7, relations=["comments"])

    repository.find_by_id.assert_awaited_once_with(
        7, columns=("*",), relations=["comments"], custom_relations=(), uow=None
    )


@pytest.mark.asyncio()
async def test_writes_delegate_to_repository() -> None:
    service, repository = _service()

    await service.create({"title": "x"})
    await service.update(1, {"title": "y"})
    await service.delete(1)
    await service.restore(1)
    await service.permanently_delete(1)
    await service.pluck("title", key="id")
    await service.get_all(["id"])

    repository.create.assert_awaited_once_with({"title": "x"}, uow=None)
    repository.update.assert_awaited_once_with(1, {"title": "y"}, uow=None)
    repository.delete_by_id.assert_awaited_once_with(1, uow=None)
    repository.restore_by_id.assert_awaited_once_with(1, uow=None)
    repository.permanently_delete_by_id.assert_awaited_once_with(1, uow=None)
    repository.pluck.assert_awaited_once_with("title", "id", (), uow=None)
    repository.all.assert_awaited_once_with(["id"], (), uow=None)


# -- end to end --------------------------------------------------------------


@pytest.mark.asyncio()
@pytest.mark.usefixtures("seeded")
async def test_request_to_page(settings, uow) -> None:
    declaration = RequestDeclaration(
        rules={"title": "string", "published": "boolean"},
        sortable=["price"],
        expandable=["author"],
    )
    params = {"sort": "price", "direction": "desc", "expand": "author", "per-page": "2"}
    parser = QueryIntentBuilder(settings).build(
        declaration, {"title": "n", "published": True}, params
    )
    service = BaseCrudService(SQLAlchemyCrudRepository(Post))

    page = await service.get_all_paginated(
        parser, conditions=[("price", ">=", 20)], uow=uow
    )

    assert page.total == 3
    assert [p.id for p in page.items] == [2, 1]
    assert page.items[0].author.name == "Ada"
    assert page.to_dict(lambda p: p.id)["meta"]["last_page"] == 2
