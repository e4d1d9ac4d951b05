"""RequestDeclaration — per-resource filterable/sortable/expandable fields."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any


class Scenario(enum.IntEnum):
    """What the inbound request intends to do, derived from its HTTP method."""

    DEFAULT = 0
    INSERT = 1
    UPDATE = 2
    DELETE = 3

    @classmethod
    def from_method(cls, method: str | None) -> Scenario:
        return _METHOD_SCENARIOS.get((method or "").upper(), cls.DEFAULT)


_METHOD_SCENARIOS = {
    "POST": Scenario.INSERT,
    "PUT": Scenario.UPDATE,
    "PATCH": Scenario.UPDATE,
    "DELETE": Scenario.DELETE,
}


def _as_tuple(values: Any) -> tuple[str, ...]:
    if not values:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(values)


@dataclass(frozen=True)
class RequestDeclaration:
    """
    Declares how one endpoint's query parameters may be translated.

    Attributes:
        rules: Field -> validation rule (``"string|max:50"`` or a token list).
            Fields with a rule become auto-filter candidates.
        scenario_rules: Optional per-scenario rule maps; when the active
            scenario has an entry it replaces ``rules``.
        custom_filters: Fields handled by repository hooks instead of
            automatic conditions.
        sortable: Fields that may be sorted on directly.
        custom_sortable: Fields whose sorting needs a repository hook.
        expandable: Relations that may be eager-loaded directly.
        custom_expandable: Relations whose loading needs a repository hook.
        sort_by: Default sort directive (``"-created_at"`` for descending).
        per_page: Endpoint default page size; ``0`` uses the global default.
        scenario: Scenario of the current request.
    """

    rules: Mapping[str, Any] = field(default_factory=dict)
    scenario_rules: Mapping[Scenario, Mapping[str, Any]] = field(
        default_factory=dict
    )
    custom_filters: tuple[str, ...] = ()
    sortable: tuple[str, ...] = ()
    custom_sortable: tuple[str, ...] = ()
    expandable: tuple[str, ...] = ()
    custom_expandable: tuple[str, ...] = ()
    sort_by: str | None = None
    per_page: int = 0
    scenario: Scenario = Scenario.DEFAULT

    def __post_init__(self) -> None:
        for name in (
            "custom_filters",
            "sortable",
            "custom_sortable",
            "expandable",
            "custom_expandable",
        ):
            object.__setattr__(self, name, _as_tuple(getattr(self, name)))

    def active_rules(self) -> Mapping[str, Any]:
        """Rule map for the current scenario."""
        return self.scenario_rules.get(self.scenario, self.rules)

    def for_method(self, method: str | None) -> RequestDeclaration:
        """Return a copy bound to the scenario of an HTTP method."""
        return replace(self, scenario=Scenario.from_method(method))
