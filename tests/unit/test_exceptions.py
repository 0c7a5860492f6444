"""
Unit tests for custom exceptions.

Tests exception hierarchy and error messages.
"""

from fastapi import HTTPException

from mdb_repository.exceptions import (
    ConfigurationError,
    DatabaseOperationError,
    RepositoryError,
)


class TestExceptionHierarchy:
    """Test exception inheritance hierarchy."""

    def test_repository_error_is_runtime_error(self):
        """Test that RepositoryError is a RuntimeError."""
        assert isinstance(RepositoryError("test error"), RuntimeError)

    def test_configuration_error_inheritance(self):
        """Test that ConfigurationError inherits from RepositoryError."""
        error = ConfigurationError("config invalid")
        assert isinstance(error, RepositoryError)
        assert isinstance(error, RuntimeError)

    def test_database_operation_error_is_http_exception(self):
        """Test that DatabaseOperationError is handled by FastAPI as-is."""
        error = DatabaseOperationError("Database operation failed")
        assert isinstance(error, HTTPException)
        assert error.status_code == 500


class TestExceptionMessages:
    """Test exception message formatting."""

    def test_repository_error_message(self):
        """Test RepositoryError message."""
        error = RepositoryError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.context == {}

    def test_repository_error_with_context(self):
        """Test RepositoryError message with context."""
        error = RepositoryError("Something went wrong", context={"collection_name": "users"})
        assert "context:" in str(error)
        assert "collection_name=users" in str(error)

    def test_configuration_error_with_key(self):
        """Test ConfigurationError with config key."""
        error = ConfigurationError("Invalid value", config_key="max_pool_size", config_value=-1)
        assert error.config_key == "max_pool_size"
        assert error.config_value == -1
        assert error.context == {"config_key": "max_pool_size", "config_value": -1}

    def test_database_operation_error_fields(self):
        """Test DatabaseOperationError status, detail and error code."""
        error = DatabaseOperationError(
            "Index not found",
            status_code=400,
            error_code=12134,
            context={"operation": "update_one"},
        )
        assert error.detail == "Index not found"
        assert error.message == "Index not found"
        assert error.error_code == 12134
        assert error.context["operation"] == "update_one"
        assert str(error) == "400: Index not found"
