"""SQLAlchemy (async ORM) implementation of the CRUD repository contract."""

from __future__ import annotations

from .executor import ALL_COLUMNS, SOFT_DELETE_COLUMN, PaginatedQueryExecutor
from .hooks import RepositoryHooks
from .mixins import SoftDeleteModelMixin
from .operators import (
    DEFAULT_OPERATOR_REGISTRY,
    ConditionOperator,
    ConditionOperatorRegistry,
    build_default_registry,
)
from .repository import SQLAlchemyCrudRepository
from .uow import SQLAlchemyUnitOfWork

__all__ = [
    "ALL_COLUMNS",
    "DEFAULT_OPERATOR_REGISTRY",
    "SOFT_DELETE_COLUMN",
    "ConditionOperator",
    "ConditionOperatorRegistry",
    "PaginatedQueryExecutor",
    "RepositoryHooks",
    "SQLAlchemyCrudRepository",
    "SQLAlchemyUnitOfWork",
    "SoftDeleteModelMixin",
    "build_default_registry",
]
