"""
Exception hierarchy for the data layer.

Provides layered exception structure for repository errors.
All exceptions include context for observability and debugging.

Store failures are not wrapped: they surface as SQLAlchemy exceptions,
re-exported here as StoreError so callers can catch them without importing
sqlalchemy.

Dependencies: sqlalchemy.exc
System role: Centralized exception handling across the repository layer
"""

from typing import Any

from sqlalchemy.exc import SQLAlchemyError

StoreError = SQLAlchemyError


class DataLayerException(Exception):
    """Base exception for all data layer errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConflictError(DataLayerException):
    """Raised when a write violates a uniqueness constraint."""

    def __init__(
        self,
        message: str = "Duplicate record",
        model: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize conflict error.

        Args:
            message: Error message
            model: Name of the model whose constraint was violated
            details: Additional context (e.g. the driver message)
        """
        details = details or {}
        if model:
            details["model"] = model
        super().__init__(message, details)


class NotFoundError(DataLayerException):
    """
    Raised by callers that require a record to exist.

    Repository reads return None for a missing record; services decide
    whether absence is an error and raise this.
    """

    def __init__(
        self,
        model: str,
        identifier: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize not found error.

        Args:
            model: Name of the model that was looked up
            identifier: ID or filter used for the lookup
            details: Additional context
        """
        details = details or {}
        details["model"] = model
        if identifier is not None:
            details["identifier"] = str(identifier)
        super().__init__(f"{model} not found", details)


class InvalidFieldError(DataLayerException):
    """Raised when a filter, sort, patch or projection names an unknown column."""

    def __init__(
        self,
        model: str,
        field: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize invalid field error.

        Args:
            model: Name of the model being queried
            field: Field name that does not exist on the model
            details: Additional context
        """
        details = details or {}
        details["model"] = model
        details["field"] = field
        super().__init__(f"Unknown field '{field}' on {model}", details)


class InvalidPopulateError(DataLayerException):
    """Raised when a populate path does not resolve to a relationship."""

    def __init__(
        self,
        model: str,
        path: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize invalid populate error.

        Args:
            model: Name of the model the segment was resolved against
            path: The populate segment that failed to resolve
            details: Additional context
        """
        details = details or {}
        details["model"] = model
        details["path"] = path
        super().__init__(f"Cannot populate '{path}' on {model}", details)
