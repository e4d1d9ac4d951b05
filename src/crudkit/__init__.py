"""CRUD repositories, services and query-parameter parsing."""

from __future__ import annotations

from .config import CrudSettings, get_settings
from .ports import ICrudRepository, Page, PaginatedQuery, UnitOfWork
from .primitives.exceptions import (
    CrudKitError,
    DataAccessError,
    EntityNotFoundError,
    ForbiddenError,
    InfrastructureError,
    NotFoundError,
    PersistenceError,
    RegistrationError,
    SessionManagementError,
    SoftDeleteNotSupportedError,
    UnitOfWorkError,
    ValidationError,
)
from .registry import CrudRegistry
from .requests import (
    QueryIntentBuilder,
    RequestDeclaration,
    RequestParser,
    Scenario,
    validate_query,
)
from .services import BaseCrudService

__version__ = "0.1.0"

__all__ = [
    "BaseCrudService",
    "CrudKitError",
    "CrudRegistry",
    "CrudSettings",
    "DataAccessError",
    "EntityNotFoundError",
    "ForbiddenError",
    "ICrudRepository",
    "InfrastructureError",
    "NotFoundError",
    "Page",
    "PaginatedQuery",
    "PersistenceError",
    "QueryIntentBuilder",
    "RegistrationError",
    "RequestDeclaration",
    "RequestParser",
    "Scenario",
    "SessionManagementError",
    "SoftDeleteNotSupportedError",
    "UnitOfWork",
    "UnitOfWorkError",
    "ValidationError",
    "get_settings",
    "validate_query",
]
