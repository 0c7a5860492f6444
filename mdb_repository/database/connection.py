"""
Shared MongoDB Client

Provides a process-wide MongoDB client so every repository in the process
shares one connection pool. Repositories only need a collection; this module
is the convenience path for building one from RepositoryConfig.

Usage:
    from mdb_repository.config import RepositoryConfig
    from mdb_repository.database import get_collection

    config = RepositoryConfig()
    users = UserRepository(get_collection(config, "users"))
"""

import logging
import threading

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import ConfigurationError as PyMongoConfigurationError
from pymongo.errors import ConnectionFailure, InvalidOperation

from ..config import RepositoryConfig
from ..constants import DEFAULT_APP_NAME, DEFAULT_MAX_IDLE_TIME_MS
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Global singleton instance
_shared_client: AsyncIOMotorClient | None = None
# threading.Lock rather than asyncio.Lock: the client may be built outside a loop
_init_lock = threading.Lock()


def get_shared_mongo_client(config: RepositoryConfig | None = None) -> AsyncIOMotorClient:
    """
    Gets or creates the shared MongoDB client.

    Args:
        config: Repository configuration (defaults to RepositoryConfig() from
            the environment). Only used when the client is first created.

    Returns:
        Shared AsyncIOMotorClient instance

    Raises:
        ConfigurationError: If the configuration is invalid or the driver
            rejects the connection URI
    """
    global _shared_client

    if _shared_client is not None:
        return _shared_client

    with _init_lock:
        # Another thread may have created it while we waited
        if _shared_client is not None:
            return _shared_client

        config = config or RepositoryConfig()
        config.validate()

        logger.info(
            f"Creating shared MongoDB client with max_pool_size={config.max_pool_size}, "
            f"min_pool_size={config.min_pool_size}"
        )

        try:
            _shared_client = AsyncIOMotorClient(
                config.mongo_uri,
                serverSelectionTimeoutMS=config.server_selection_timeout_ms,
                appname=DEFAULT_APP_NAME,
                maxPoolSize=config.max_pool_size,
                minPoolSize=config.min_pool_size,
                maxIdleTimeMS=DEFAULT_MAX_IDLE_TIME_MS,
                retryWrites=True,
                retryReads=True,
            )
        except (PyMongoConfigurationError, ConnectionFailure, ValueError, TypeError) as e:
            logger.error(f"Failed to create shared MongoDB client: {e}", exc_info=True)
            raise ConfigurationError(
                "Failed to create MongoDB client",
                config_key="mongo_uri",
                context={"error_type": type(e).__name__},
            ) from e

        return _shared_client


def get_collection(config: RepositoryConfig, collection_name: str) -> AsyncIOMotorCollection:
    """
    Return a collection of the configured database on the shared client.

    Args:
        config: Repository configuration naming the database
        collection_name: Collection to return
    """
    client = get_shared_mongo_client(config)
    return client[config.db_name][collection_name]


def close_shared_client() -> None:
    """
    Closes the shared MongoDB client.
    Should be called during application shutdown.
    """
    global _shared_client

    if _shared_client is not None:
        try:
            _shared_client.close()
            logger.info("Shared MongoDB client closed")
        except (InvalidOperation, AttributeError, RuntimeError) as e:
            logger.warning(f"Error closing shared MongoDB client: {e}")
        finally:
            _shared_client = None
