"""
Condition operator compilation strategy.

Each ``(field, operator, value)`` condition is compiled by a
``ConditionOperator`` looked up by its SQL-style name (``"="``, ``"LIKE"``
...). Lookup is case-insensitive. Register extra operators on a
``ConditionOperatorRegistry`` and hand it to the executor.
"""

from __future__ import annotations

import operator as op_module
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, cast

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


class ConditionOperator(ABC):
    """
    Strategy interface for compiling a condition operator
    into a SQLAlchemy ``ColumnElement[bool]``.
    """

    @property
    @abstractmethod
    def names(self) -> tuple[str, ...]:
        """Operator spellings this strategy handles."""
        ...

    @abstractmethod
    def apply(self, column: Any, value: Any) -> ColumnElement[bool]: ...


class EqualOperator(ConditionOperator):
    @property
    def names(self) -> tuple[str, ...]:
        return ("=", "==")

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        if value is None:
            return cast("ColumnElement[bool]", column.is_(None))
        return cast("ColumnElement[bool]", op_module.eq(column, value))


class NotEqualOperator(ConditionOperator):
    @property
    def names(self) -> tuple[str, ...]:
        return ("!=", "<>")

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        if value is None:
            return cast("ColumnElement[bool]", column.is_not(None))
        return cast("ColumnElement[bool]", op_module.ne(column, value))


class GreaterThanOperator(ConditionOperator):
    @property
    def names(self) -> tuple[str, ...]:
        return (">",)

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.gt(column, value))


class GreaterEqualOperator(ConditionOperator):
    @property
    def names(self) -> tuple[str, ...]:
        return (">=",)

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.ge(column, value))


class LessThanOperator(ConditionOperator):
    @property
    def names(self) -> tuple[str, ...]:
        return ("<",)

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.lt(column, value))


class LessEqualOperator(ConditionOperator):
    @property
    def names(self) -> tuple[str, ...]:
        return ("<=",)

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.le(column, value))


class LikeOperator(ConditionOperator):
    @property
    def names(self) -> tuple[str, ...]:
        return ("like",)

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.like(value))


class NotLikeOperator(ConditionOperator):
    @property
    def names(self) -> tuple[str, ...]:
        return ("not like",)

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", ~column.like(value))


class ILikeOperator(ConditionOperator):
    @property
    def names(self) -> tuple[str, ...]:
        return ("ilike",)

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.ilike(value))


class InOperator(ConditionOperator):
    @property
    def names(self) -> tuple[str, ...]:
        return ("in",)

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.in_(list(value)))


class NotInOperator(ConditionOperator):
    @property
    def names(self) -> tuple[str, ...]:
        return ("not in",)

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.not_in(list(value)))


class ConditionOperatorRegistry:
    """Registry of ``ConditionOperator`` instances keyed by lower-cased name."""

    def __init__(self) -> None:
        self._operators: dict[str, ConditionOperator] = {}

    @staticmethod
    def _key(name: str) -> str:
        return " ".join(name.lower().split())

    def register(self, operator: ConditionOperator) -> None:
        for name in operator.names:
            self._operators[self._key(name)] = operator

    def register_all(self, *operators: ConditionOperator) -> None:
        for op in operators:
            self.register(op)

    def get(self, name: str) -> ConditionOperator | None:
        return self._operators.get(self._key(name))

    def has(self, name: str) -> bool:
        return self._key(name) in self._operators

    @property
    def supported_operators(self) -> set[str]:
        return set(self._operators.keys())

    def apply(self, name: str, column: Any, value: Any) -> ColumnElement[bool]:
        """
        Look up the operator and apply.

        Raises:
            ValueError: If the operator is not registered.
        """
        op = self.get(name)
        if op is None:
            raise ValueError(f"Unsupported condition operator: {name!r}")
        return op.apply(column, value)


def build_default_registry() -> ConditionOperatorRegistry:
    registry = ConditionOperatorRegistry()
    registry.register_all(
        EqualOperator(),
        NotEqualOperator(),
        GreaterThanOperator(),
        GreaterEqualOperator(),
        LessThanOperator(),
        LessEqualOperator(),
        LikeOperator(),
        NotLikeOperator(),
        ILikeOperator(),
        InOperator(),
        NotInOperator(),
    )
    return registry


DEFAULT_OPERATOR_REGISTRY = build_default_registry()
