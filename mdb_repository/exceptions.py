"""
Custom exceptions for MDB_REPOSITORY.

Configuration problems raise subclasses of RepositoryError (a RuntimeError).
Database failures surfaced to callers are DatabaseOperationError, an
HTTPException subclass, so FastAPI turns them into responses unchanged.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class RepositoryError(RuntimeError):
    """
    Base exception for repository errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (collection_name,
                 operation, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            context: Optional dictionary with additional context information
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class ConfigurationError(RepositoryError):
    """
    Raised when configuration is invalid or missing.

    Attributes:
        message: Error message
        config_key: Configuration key that caused the error (if available)
        config_value: Configuration value that caused the error (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value


class DatabaseOperationError(HTTPException):
    """
    A database failure translated to an HTTP status.

    Attributes:
        status_code: HTTP status code chosen for the failure
        detail: Client-facing message
        error_code: Numeric driver error code, if the driver supplied one
        context: Additional context (operation, collection, ...)
    """

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail)
        self.error_code = error_code
        self.context = context or {}

    @property
    def message(self) -> str:
        return self.detail

    def __str__(self) -> str:
        return f"{self.status_code}: {self.detail}"
