"""
Observability components.

Provides contextual logging and health check capabilities.
"""

from .health import HealthCheckResult, HealthStatus, check_all, check_repository_health
from .logging import (
    ContextualLoggerAdapter,
    get_logger,
    get_logging_context,
    log_context,
    log_operation,
    repository_operation,
)

__all__ = [
    # Logging
    "log_context",
    "get_logging_context",
    "repository_operation",
    "ContextualLoggerAdapter",
    "get_logger",
    "log_operation",
    # Health
    "HealthStatus",
    "HealthCheckResult",
    "check_all",
    "check_repository_health",
]
