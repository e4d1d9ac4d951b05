"""
Per-repository query hooks.

Generic code cannot know how to filter on a computed field, sort by an
aggregate or load a relation that needs a custom loader. A repository is
therefore built with a :class:`RepositoryHooks` bundle:

* ``condition_handlers`` / ``sorting_handlers`` map one field name to a
  handler;
* ``customize_query``, ``add_custom_conditions``, ``add_custom_sorting`` and
  ``add_custom_relations`` are the fallbacks, identity by default.

Every hook receives the current ``Select`` and returns the statement to
continue with (statements are immutable, so return the new one)::

    hooks = RepositoryHooks()

    @hooks.on_condition("author_name")
    def _by_author(stmt, value):
        return stmt.join(Post.author).where(Author.name == value)

    @hooks.on_sorting("comments_count")
    def _by_comments(stmt, direction):
        ...
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from sqlalchemy import Select

    CustomizeQuery = Callable[[Select[Any], Mapping[str, Any]], Select[Any]]
    ConditionHandler = Callable[[Select[Any], Any], Select[Any]]
    CustomConditions = Callable[[Select[Any], Mapping[str, Any]], Select[Any]]
    SortingHandler = Callable[[Select[Any], str], Select[Any]]
    CustomSorting = Callable[[Select[Any], str, str], Select[Any]]
    CustomRelations = Callable[[Select[Any], Sequence[str]], Select[Any]]

F = TypeVar("F", bound=Callable[..., Any])


def _customize_query(stmt: Select[Any], params: Mapping[str, Any]) -> Select[Any]:
    return stmt


def _add_custom_conditions(
    stmt: Select[Any], conditions: Mapping[str, Any]
) -> Select[Any]:
    return stmt


def _add_custom_sorting(stmt: Select[Any], attr: str, direction: str) -> Select[Any]:
    return stmt


def _add_custom_relations(stmt: Select[Any], relations: Sequence[str]) -> Select[Any]:
    return stmt


@dataclass
class RepositoryHooks:
    """
    Hook bundle consulted by the paginated query executor.

    Attributes:
        customize_query: Shapes the statement before any filter is applied.
        condition_handlers: ``{field: handler(stmt, value)}`` for custom filters.
        add_custom_conditions: Fallback for custom filters without a handler;
            called once per such key with the full custom filter map.
        sorting_handlers: ``{field: handler(stmt, "ASC" | "DESC")}``.
        add_custom_sorting: Fallback ``(stmt, field, direction)`` for custom
            sorting without a handler.
        add_custom_relations: Attaches custom-expandable relations.
    """

    customize_query: CustomizeQuery = _customize_query
    condition_handlers: dict[str, ConditionHandler] = field(default_factory=dict)
    add_custom_conditions: CustomConditions = _add_custom_conditions
    sorting_handlers: dict[str, SortingHandler] = field(default_factory=dict)
    add_custom_sorting: CustomSorting = _add_custom_sorting
    add_custom_relations: CustomRelations = _add_custom_relations

    def on_condition(self, attr: str) -> Callable[[F], F]:
        """Decorator registering a condition handler for *attr*."""

        def decorator(fn: F) -> F:
            self.condition_handlers[attr] = fn
            return fn

        return decorator

    def on_sorting(self, attr: str) -> Callable[[F], F]:
        """Decorator registering a sorting handler for *attr*."""

        def decorator(fn: F) -> F:
            self.sorting_handlers[attr] = fn
            return fn

        return decorator
