"""QueryIntentBuilder — validated input + query params -> RequestParser."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from ..config import get_settings
from .pagination import PerPageParser
from .parser import Condition, RequestParser
from .rules import is_string_rule, normalise_rule
from .sorting import encode_sort, split_sort_param

if TYPE_CHECKING:
    from ..config import CrudSettings
    from .declaration import RequestDeclaration

logger = logging.getLogger("crudkit.requests")


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str | bytes | list | tuple | dict | set | frozenset):
        return len(value) == 0
    return False


def _unique(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            out.append(value)
    return out


class QueryIntentBuilder:
    """
    Translate one request into a :class:`RequestParser`.

    The builder never raises: malformed or missing parameters degrade to
    empty collections and default page sizes. Validation of the field values
    themselves is expected to have happened already (see
    :func:`crudkit.requests.validation.validate_query`).
    """

    def __init__(
        self,
        settings: CrudSettings | None = None,
        *,
        sort_key: str = "sort",
        direction_key: str = "direction",
        expand_key: str = "expand",
        per_page_key: str = "per-page",
        page_key: str = "page",
    ) -> None:
        self._settings = settings or get_settings()
        self._pagination = PerPageParser()
        self._sort_key = sort_key
        self._direction_key = direction_key
        self._expand_key = expand_key
        self._per_page_key = per_page_key
        self._page_key = page_key

    def build(
        self,
        declaration: RequestDeclaration,
        validated: Mapping[str, Any],
        query_params: Mapping[str, Any],
    ) -> RequestParser:
        """Return the full query intent for a list request."""
        sort_field, descending = self._sort_request(query_params)
        parser = RequestParser(
            auto_filters=tuple(self.auto_filters(declaration, validated)),
            custom_filters=self.custom_filters(declaration, query_params),
            auto_sorting=self._auto_sorting(declaration, sort_field, descending),
            custom_sorting=self._custom_sorting(declaration, sort_field, descending),
            expandable=tuple(self.expandable(declaration, query_params)),
            custom_expandable=tuple(self.custom_expandable(declaration, query_params)),
            per_page=self.per_page(declaration, query_params),
            page=self._pagination.parse_page(query_params, page_key=self._page_key),
        )
        logger.debug("Parsed request intent: %r", parser)
        return parser

    def build_light(
        self,
        declaration: RequestDeclaration,
        query_params: Mapping[str, Any],
    ) -> RequestParser:
        """Return an intent carrying only the requested expansions."""
        return RequestParser(
            expandable=tuple(self.expandable(declaration, query_params)),
            custom_expandable=tuple(self.custom_expandable(declaration, query_params)),
            per_page=self._settings.items_count_per_page,
        )

    # -- filters ------------------------------------------------------------

    def auto_filters(
        self,
        declaration: RequestDeclaration,
        validated: Mapping[str, Any],
    ) -> list[Condition]:
        filters: list[Condition] = []
        custom = set(declaration.custom_filters)
        for attr, rule in declaration.active_rules().items():
            if attr in custom:
                continue
            tokens = normalise_rule(rule)
            if tokens is None:
                continue
            value = validated.get(attr)
            if is_string_rule(tokens) and not _is_empty(value):
                filters.append((attr, "LIKE", f"%{value}%"))
            elif not _is_empty(value):
                filters.append((attr, "=", value))
        return filters

    def custom_filters(
        self,
        declaration: RequestDeclaration,
        query_params: Mapping[str, Any],
    ) -> dict[str, Any]:
        return {
            attr: query_params[attr]
            for attr in declaration.custom_filters
            if attr in query_params
        }

    # -- sorting ------------------------------------------------------------

    def _sort_request(self, query_params: Mapping[str, Any]) -> tuple[str | None, bool]:
        sort_field, descending = split_sort_param(query_params.get(self._sort_key))
        direction = query_params.get(self._direction_key)
        if isinstance(direction, str) and direction.strip():
            descending = direction.strip().lower() == "desc"
        return sort_field, descending

    def _auto_sorting(
        self,
        declaration: RequestDeclaration,
        sort_field: str | None,
        descending: bool,
    ) -> str | None:
        if sort_field in declaration.custom_sortable:
            return None
        if sort_field is None or sort_field not in declaration.sortable:
            return declaration.sort_by
        return encode_sort(sort_field, descending=descending)

    def _custom_sorting(
        self,
        declaration: RequestDeclaration,
        sort_field: str | None,
        descending: bool,
    ) -> str | None:
        if sort_field is None or sort_field not in declaration.custom_sortable:
            return None
        return encode_sort(sort_field, descending=descending)

    # -- expansion ----------------------------------------------------------

    def _expand_tokens(self, query_params: Mapping[str, Any]) -> list[str]:
        raw = query_params.get(self._expand_key)
        if not isinstance(raw, str):
            return []
        return _unique(token.strip() for token in raw.split(","))

    def expandable(
        self,
        declaration: RequestDeclaration,
        query_params: Mapping[str, Any],
    ) -> list[str]:
        return [
            name
            for name in self._expand_tokens(query_params)
            if name in declaration.expandable
            and name not in declaration.custom_expandable
        ]

    def custom_expandable(
        self,
        declaration: RequestDeclaration,
        query_params: Mapping[str, Any],
    ) -> list[str]:
        return [
            name
            for name in self._expand_tokens(query_params)
            if name in declaration.custom_expandable
        ]

    # -- pagination ---------------------------------------------------------

    def per_page(
        self,
        declaration: RequestDeclaration,
        query_params: Mapping[str, Any],
    ) -> int:
        return self._pagination.parse_per_page(
            query_params,
            default=self._settings.items_count_per_page,
            maximum=self._settings.max_items_count_per_page,
            local_default=declaration.per_page,
            per_page_key=self._per_page_key,
        )
