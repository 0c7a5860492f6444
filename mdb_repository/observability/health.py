"""
Health check utilities for MDB_REPOSITORY.

Provides health check functions for monitoring repository connectivity.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """Health status enumeration."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


@dataclass
class HealthCheckResult:
    """Result of a health check."""

    name: str
    status: HealthStatus
    message: str
    details: dict[str, Any] | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


async def check_repository_health(repository: Any | None) -> HealthCheckResult:
    """
    Check that a repository can reach its database.

    Args:
        repository: EntityRepository instance

    Returns:
        HealthCheckResult named after the repository's collection
    """
    if repository is None:
        return HealthCheckResult(
            name="repository",
            status=HealthStatus.UNKNOWN,
            message="Repository not configured",
        )

    name = f"mongodb:{repository.collection_name}"

    if await repository.is_database_connected():
        return HealthCheckResult(
            name=name,
            status=HealthStatus.HEALTHY,
            message="MongoDB connection is healthy",
        )

    logger.warning(f"Health check failed for collection '{repository.collection_name}'")
    return HealthCheckResult(
        name=name,
        status=HealthStatus.UNHEALTHY,
        message="MongoDB is not reachable",
    )


async def check_all(repositories: list[Any]) -> dict[str, Any]:
    """
    Run check_repository_health for several repositories.

    Returns:
        Dictionary with overall status and individual check results
    """
    results = [await check_repository_health(repo) for repo in repositories]

    statuses = [r.status for r in results]
    if HealthStatus.UNHEALTHY in statuses:
        overall_status = HealthStatus.UNHEALTHY
    elif statuses and all(s == HealthStatus.HEALTHY for s in statuses):
        overall_status = HealthStatus.HEALTHY
    else:
        overall_status = HealthStatus.UNKNOWN

    return {
        "status": overall_status.value,
        "timestamp": datetime.now().isoformat(),
        "checks": [r.to_dict() for r in results],
    }
