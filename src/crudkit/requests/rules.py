"""Validation-rule normalisation used by auto-filter inference."""

from __future__ import annotations

from typing import Any

RULE_SEPARATOR = "|"
STRING_RULE = "string"


def normalise_rule(rule: Any) -> list[Any] | None:
    """Return the rule as a token list, or ``None`` if it cannot be read.

    ``"string|max:50"`` and ``["string", "max:50"]`` both yield
    ``["string", "max:50"]``. Tokens inside a sequence are kept as-is so
    rule objects can sit next to plain strings.
    """
    if isinstance(rule, str):
        return rule.split(RULE_SEPARATOR)
    if isinstance(rule, list | tuple):
        return list(rule)
    return None


def is_string_rule(tokens: list[Any]) -> bool:
    return STRING_RULE in tokens
