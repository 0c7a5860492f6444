"""
Pytest configuration and shared fixtures for MDB_REPOSITORY tests.

This module provides:
- Mock Motor collection, client and session fixtures
- Repository fixtures built on the mocks
- Environment isolation
"""

from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection

from mdb_repository.repositories import EntityRepository

# ============================================================================
# MOCK MONGODB FIXTURES
# ============================================================================


def make_cursor(documents: list) -> MagicMock:
    """Build a Motor-like cursor whose skip/limit chain and to_list returns documents."""
    cursor = MagicMock()
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=documents)
    return cursor


@pytest.fixture
def cursor_factory():
    """Provide make_cursor to tests that stub find()/aggregate() results."""
    return make_cursor


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock client session with an open transaction."""
    session = MagicMock()
    session.in_transaction = True
    session.start_transaction = MagicMock()
    session.commit_transaction = AsyncMock()
    session.abort_transaction = AsyncMock()
    session.end_session = AsyncMock()
    return session


@pytest.fixture
def mock_mongo_client(mock_session: MagicMock) -> MagicMock:
    """Create a mock MongoDB client that hands out mock_session."""
    client = MagicMock()
    client.admin = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1})
    client.start_session = AsyncMock(return_value=mock_session)
    return client


@pytest.fixture
def mock_mongo_collection(mock_mongo_client: MagicMock) -> MagicMock:
    """Create a mock MongoDB collection."""
    collection = MagicMock(spec=AsyncIOMotorCollection)
    collection.name = "users"
    collection.database = MagicMock()
    collection.database.client = mock_mongo_client
    collection.find = MagicMock(return_value=make_cursor([]))
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))
    collection.insert_many = AsyncMock(
        return_value=MagicMock(inserted_ids=[ObjectId(), ObjectId()])
    )
    collection.update_one = AsyncMock(return_value=MagicMock(modified_count=1))
    collection.update_many = AsyncMock(return_value=MagicMock(modified_count=2))
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=2))
    collection.count_documents = AsyncMock(return_value=0)
    collection.distinct = AsyncMock(return_value=[])
    collection.aggregate = MagicMock(return_value=make_cursor([]))
    return collection


@pytest.fixture
def repository(mock_mongo_collection: MagicMock) -> EntityRepository:
    """Create an EntityRepository over the mock collection."""
    return EntityRepository(mock_mongo_collection)


@pytest.fixture
def logging_repository(mock_mongo_collection: MagicMock) -> EntityRepository:
    """Create an EntityRepository that logs database errors."""
    return EntityRepository(mock_mongo_collection, log_errors=True)


# ============================================================================
# TEST DATA FIXTURES
# ============================================================================


@pytest.fixture
def sample_user() -> Dict[str, Any]:
    """Provide a stored user document."""
    return {
        "_id": ObjectId("507f1f77bcf86cd799439011"),
        "email": "john@example.com",
        "name": "John",
        "__v": 2,
    }


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch):
    """Reset environment variables before each test."""
    env_vars_to_clear = [
        "MONGO_URI",
        "DB_NAME",
        "MONGO_MAX_POOL_SIZE",
        "MONGO_MIN_POOL_SIZE",
        "MONGO_SERVER_SELECTION_TIMEOUT_MS",
        "REPOSITORY_LOG_ERRORS",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    yield
