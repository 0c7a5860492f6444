"""
MDB_REPOSITORY - MongoDB Entity Repository

Generic CRUD repository for MongoDB collections in FastAPI backends, with
driver error translation to HTTP status codes and optimistic by-id updates.
"""

from .config import RepositoryConfig
from .database import close_shared_client, get_collection, get_shared_mongo_client
from .exceptions import ConfigurationError, DatabaseOperationError, RepositoryError
from .repositories import EntityRepository, translate_database_error

__version__ = "0.1.0"

__all__ = [
    # Repository
    "EntityRepository",
    "translate_database_error",
    # Errors
    "RepositoryError",
    "ConfigurationError",
    "DatabaseOperationError",
    # Configuration and connection
    "RepositoryConfig",
    "get_shared_mongo_client",
    "get_collection",
    "close_shared_client",
]
