from __future__ import annotations

import pytest

from crudkit.ports import Page, PaginatedQuery

# --- Page ---


def test_page_metadata() -> None:
    page = Page(items=["c", "d"], total=5, page=2, per_page=2)

    assert page.last_page == 3
    assert page.has_more_pages is True
    assert page.first_item == 3
    assert page.last_item == 4
    assert len(page) == 2


def test_empty_page_has_one_last_page_and_no_positions() -> None:
    page: Page[str] = Page(items=[], total=0, page=1, per_page=20)

    assert page.last_page == 1
    assert page.has_more_pages is False
    assert page.first_item is None
    assert page.last_item is None


def test_page_to_dict_serialises_items() -> None:
    page = Page(items=[1, 2], total=2, page=1, per_page=10)

    assert page.to_dict(lambda n: {"id": n}) == {
        "data": [{"id": 1}, {"id": 2}],
        "meta": {
            "total": 2,
            "per_page": 10,
            "current_page": 1,
            "last_page": 1,
            "from": 1,
            "to": 2,
        },
    }
    assert page.to_dict()["data"] == [1, 2]


# --- PaginatedQuery ---


def test_query_defaults_and_offset() -> None:
    query = PaginatedQuery(per_page=10, page=3)

    assert query.columns == ("*",)
    assert query.offset == 20


def test_query_stores_sequences_as_tuples() -> None:
    query = PaginatedQuery(
        columns=["id", "title"],
        conditions=[("price", ">", 10)],
        relations=["author"],
        custom_relations=["comments"],
    )

    assert query.columns == ("id", "title")
    assert query.conditions == (("price", ">", 10),)
    assert query.relations == ("author",)
    assert query.custom_relations == ("comments",)


@pytest.mark.parametrize("kwargs", [{"per_page": 0}, {"page": 0}])
def test_query_rejects_non_positive_paging(kwargs: dict[str, int]) -> None:
    with pytest.raises(ValueError, match="must be positive"):
        PaginatedQuery(**kwargs)
