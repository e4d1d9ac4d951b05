"""Turn request query parameters into filters, sorting, expansion and page size."""

from __future__ import annotations

from .builder import QueryIntentBuilder
from .declaration import RequestDeclaration, Scenario
from .pagination import PerPageParser
from .parser import Condition, RequestParser
from .rules import normalise_rule
from .sorting import decode_sort, encode_sort
from .validation import validate_query

__all__ = [
    "Condition",
    "PerPageParser",
    "QueryIntentBuilder",
    "RequestDeclaration",
    "RequestParser",
    "Scenario",
    "decode_sort",
    "encode_sort",
    "normalise_rule",
    "validate_query",
]
