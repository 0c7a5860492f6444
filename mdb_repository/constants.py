"""
Constants for MDB_REPOSITORY.

This module contains all shared constants used across the codebase to avoid
magic numbers and improve maintainability.
"""

from typing import Final

# ============================================================================
# DATABASE CONSTANTS
# ============================================================================

# Connection pool defaults
DEFAULT_MAX_POOL_SIZE: Final[int] = 50
"""Default maximum MongoDB connection pool size."""

DEFAULT_MIN_POOL_SIZE: Final[int] = 10
"""Default minimum MongoDB connection pool size."""

DEFAULT_SERVER_SELECTION_TIMEOUT_MS: Final[int] = 5000
"""Default server selection timeout in milliseconds."""

DEFAULT_MAX_IDLE_TIME_MS: Final[int] = 45000
"""Default maximum idle time before closing connections (milliseconds)."""

DEFAULT_APP_NAME: Final[str] = "MDB_REPOSITORY"
"""Application name reported to the MongoDB server."""

# ============================================================================
# DOCUMENT CONSTANTS
# ============================================================================

ID_FIELD: Final[str] = "_id"
"""Primary key field of every MongoDB document."""

DEFAULT_VERSION_KEY: Final[str] = "__v"
"""Field holding the document version used by optimistic updates."""

# ============================================================================
# ERROR TRANSLATION CONSTANTS
# ============================================================================

DUPLICATE_KEY_CODE: Final[int] = 11000
"""MongoDB error code for a unique index violation."""

DEFAULT_ERROR_MESSAGE: Final[str] = "Database operation failed"
"""Message used for driver errors without a known code."""

NOT_FOUND_MESSAGE: Final[str] = "No data found with ID {id}"
"""Message template for by-id lookups that match nothing."""

CONCURRENCY_CONFLICT_MESSAGE: Final[str] = "Concurrency conflict"
"""Message used when the submitted version does not match the stored one."""

VALIDATION_FAILED_MESSAGE: Final[str] = "Document validation failed"
"""Message used when a document fails model validation."""

VALIDATION_FAILED_STATUS: Final[int] = 422
"""HTTP status used when a document fails model validation."""

KNOWN_ERROR_MESSAGES: Final[dict[int, str]] = {
    11000: "Duplicate key error",
    11001: "Duplicate key error",
    12000: "Invalid index specification",
    12010: "Cannot build index on a non-existing field",
    12102: "Index key too long",
    12134: "Index not found",
}
"""Driver error codes that map to a client error, with their fixed messages."""

# ============================================================================
# HEALTH CHECK CONSTANTS
# ============================================================================

DEFAULT_PING_TIMEOUT_SECONDS: Final[float] = 5.0
"""Default timeout for the server ping used by connectivity checks."""
