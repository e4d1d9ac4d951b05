"""Primitives: exceptions."""

from __future__ import annotations

from .exceptions import (
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

__all__ = [
    "CrudKitError",
    "DataAccessError",
    "EntityNotFoundError",
    "ForbiddenError",
    "InfrastructureError",
    "NotFoundError",
    "PersistenceError",
    "RegistrationError",
    "SessionManagementError",
    "SoftDeleteNotSupportedError",
    "UnitOfWorkError",
    "ValidationError",
]
