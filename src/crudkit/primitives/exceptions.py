"""Domain and infrastructure exceptions for crudkit."""

from __future__ import annotations


class CrudKitError(Exception):
    """Root exception for the entire crudkit toolkit."""


class NotFoundError(CrudKitError):
    """Raised when a record or resource is not found."""


class EntityNotFoundError(NotFoundError):
    """Raised when a specific record cannot be found by ID."""

    def __init__(self, entity_type: str, entity_id: object) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id={entity_id!r} not found")


class ForbiddenError(CrudKitError):
    """Raised when the store refuses an operation on referential grounds.

    Usage: ``delete_by_id`` raises this when the record is still referenced
    by other records (foreign-key / integrity violation).
    """

    def __init__(
        self, message: str = "Forbidden. This item has relations to other items"
    ) -> None:
        super().__init__(message)


class ValidationError(CrudKitError):
    """Raised when request validation fails.

    Carries structured errors: ``{field: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(str(self.errors))


class RegistrationError(CrudKitError):
    """Raised when a contract binding conflict or lookup miss is detected."""


class InfrastructureError(CrudKitError):
    """Base class for all infrastructure-related errors."""


class PersistenceError(InfrastructureError):
    """Base class for all persistence-related errors."""


class DataAccessError(PersistenceError):
    """Raised when the underlying store fails or is unreachable."""


class SoftDeleteNotSupportedError(PersistenceError):
    """Raised when a trash operation targets a model without ``deleted_at``."""

    def __init__(self, entity_type: str) -> None:
        self.entity_type = entity_type
        super().__init__(f"{entity_type} does not support soft deletes")


class SessionManagementError(PersistenceError):
    """Raised when session creation or management fails."""


class UnitOfWorkError(PersistenceError):
    """Raised when Unit of Work operations fail."""
