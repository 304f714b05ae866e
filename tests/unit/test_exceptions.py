"""Tests for the data layer exception hierarchy."""

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from datalayer.boundary.db.repositories.base_repository import is_unique_violation
from datalayer.core.exceptions import (
    ConflictError,
    DataLayerException,
    InvalidFieldError,
    InvalidPopulateError,
    NotFoundError,
    StoreError,
)


class _DriverError(Exception):
    """Stand-in for a DBAPI error carrying a SQLSTATE."""

    def __init__(self, message: str, sqlstate: str | None = None) -> None:
        super().__init__(message)
        self.sqlstate = sqlstate


class TestExceptionMessages:
    """Tests for message and details formatting."""

    def test_details_appear_in_str(self) -> None:
        """str() includes the details mapping."""
        error = DataLayerException("broken", {"key": "value"})
        assert str(error) == "broken | Details: {'key': 'value'}"
        assert str(DataLayerException("plain")) == "plain"

    def test_conflict_records_model(self) -> None:
        """ConflictError carries the model name."""
        error = ConflictError(model="UserModel", details={"error": "dup"})
        assert error.message == "Duplicate record"
        assert error.details == {"error": "dup", "model": "UserModel"}

    def test_not_found_records_identifier(self) -> None:
        """NotFoundError stringifies the identifier."""
        error = NotFoundError("UserModel", 42)
        assert error.message == "UserModel not found"
        assert error.details == {"model": "UserModel", "identifier": "42"}

    def test_field_and_populate_errors(self) -> None:
        """Validation errors name the model and the offending input."""
        assert InvalidFieldError("UserModel", "age").details == {"model": "UserModel", "field": "age"}
        assert InvalidPopulateError("UserModel", "x").details == {"model": "UserModel", "path": "x"}

    def test_hierarchy(self) -> None:
        """Domain errors share one base; store errors are SQLAlchemy's."""
        assert issubclass(ConflictError, DataLayerException)
        assert issubclass(InvalidPopulateError, DataLayerException)
        assert StoreError is SQLAlchemyError


class TestUniqueViolationDetection:
    """Tests for classifying IntegrityError causes."""

    def test_postgres_sqlstate(self) -> None:
        """SQLSTATE 23505 is a unique violation, 23502 is not."""
        unique = IntegrityError("INSERT", {}, _DriverError("dup", sqlstate="23505"))
        not_null = IntegrityError("INSERT", {}, _DriverError("null", sqlstate="23502"))
        assert is_unique_violation(unique) is True
        assert is_unique_violation(not_null) is False

    def test_message_fallback(self) -> None:
        """Without a SQLSTATE the driver message decides."""
        unique = IntegrityError("INSERT", {}, _DriverError("UNIQUE constraint failed: users.email"))
        not_null = IntegrityError("INSERT", {}, _DriverError("NOT NULL constraint failed: users.password"))
        assert is_unique_violation(unique) is True
        assert is_unique_violation(not_null) is False
