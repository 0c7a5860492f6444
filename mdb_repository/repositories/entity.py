"""
MongoDB Entity Repository

Generic CRUD repository over a Motor collection, meant to be subclassed per
entity. Methods forward to the driver and translate driver failures into
DatabaseOperationError (an HTTPException) so FastAPI routes can let them
propagate.
"""

import asyncio
import logging
from typing import Any, NoReturn

from fastapi import status
from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorCollection
from pydantic import BaseModel
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from ..constants import (
    CONCURRENCY_CONFLICT_MESSAGE,
    DEFAULT_PING_TIMEOUT_SECONDS,
    DEFAULT_VERSION_KEY,
    ID_FIELD,
    NOT_FOUND_MESSAGE,
)
from ..exceptions import ConfigurationError, DatabaseOperationError
from ..observability.logging import get_logger, log_operation, repository_operation
from ..utils.mongo import cast_update, to_object_id
from .errors import DATABASE_ERRORS, translate_database_error

logger = get_logger(__name__)

Document = dict[str, Any]


class EntityRepository:
    """
    Base repository with common CRUD operations for one MongoDB collection.

    Subclass it per entity and add entity-specific queries:

    Example:
        class UserRepository(EntityRepository):
            def __init__(self, db: AsyncIOMotorDatabase):
                super().__init__(db.users, document_model=User, log_errors=True)

            async def find_by_email(self, email: str) -> dict | None:
                return await self.find_one({"email": email})

        users = UserRepository(db)
        user = await users.create({"email": "john@example.com", "name": "John"})
        await users.update_by_id(str(user["_id"]), {"name": "Johnny", "__v": 0})

    Driver errors surface as DatabaseOperationError:
        - duplicate key (11000/11001) and index errors -> 400
        - missing document in find_by_id/update_by_id -> 404
        - stale version in update_by_id -> 409
        - document_model validation failure -> 422
        - anything else -> 500 "Database operation failed"
    """

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        *,
        document_model: type[BaseModel] | None = None,
        log_errors: bool = False,
        version_key: str | None = DEFAULT_VERSION_KEY,
        ping_timeout_seconds: float = DEFAULT_PING_TIMEOUT_SECONDS,
    ):
        """
        Initialize the repository.

        Args:
            collection: Motor collection holding the entity's documents
            document_model: Optional pydantic model used to validate documents
                passed to create/create_many
            log_errors: Log database errors before translating them
            version_key: Field holding the document version (None disables
                versioning)
            ping_timeout_seconds: Timeout for is_database_connected()

        Raises:
            ConfigurationError: If no collection is given
        """
        if collection is None:
            raise ConfigurationError("collection is required", config_key="collection")

        self._collection = collection
        self._document_model = document_model
        self._log_errors = log_errors
        self._version_key = version_key
        self._ping_timeout_seconds = ping_timeout_seconds

    @property
    def collection(self) -> AsyncIOMotorCollection:
        """The underlying Motor collection, for operations not covered here."""
        return self._collection

    @property
    def collection_name(self) -> str:
        return self._collection.name

    # Create

    @repository_operation
    async def create(self, entity: Document | BaseModel) -> Document:
        """
        Insert a new document.

        Args:
            entity: Document data (dict or pydantic model instance)

        Returns:
            The inserted document including its ``_id``

        Raises:
            DatabaseOperationError: If validation or the insert fails
        """
        try:
            document = self._prepare_document(entity)
            result = await self._collection.insert_one(document)
        except DATABASE_ERRORS as e:
            self._handle_database_error(e, "create")

        document[ID_FIELD] = result.inserted_id
        logger.debug(f"Created document in '{self.collection_name}' with id={result.inserted_id}")
        return document

    @repository_operation
    async def create_many(self, entities: list[Document | BaseModel]) -> list[Document]:
        """
        Insert multiple documents in order.

        Returns:
            The inserted documents including their ``_id``

        Raises:
            DatabaseOperationError: If validation fails or any insert fails
        """
        try:
            documents = [self._prepare_document(entity) for entity in entities]
            result = await self._collection.insert_many(documents)
        except DATABASE_ERRORS as e:
            self._handle_database_error(e, "create_many")

        for document, inserted_id in zip(documents, result.inserted_ids):
            document[ID_FIELD] = inserted_id

        logger.debug(f"Created {len(documents)} documents in '{self.collection_name}'")
        return documents

    # Read

    @repository_operation
    async def find(
        self,
        filter: Document,
        projection: Document | None = None,
        skip: int = 0,
        limit: int = 0,
    ) -> list[Document]:
        """
        Find documents matching a filter.

        Args:
            filter: MongoDB filter
            projection: Fields to include/exclude from the result
            skip: Number of documents to skip
            limit: Maximum documents to return (0 means no limit)

        Returns:
            List of matching documents
        """
        try:
            cursor = self._collection.find(filter, projection).skip(skip).limit(limit)
            return await cursor.to_list(length=None)
        except DATABASE_ERRORS as e:
            self._handle_database_error(e, "find")

    @repository_operation
    async def find_by_id(self, id: Any, projection: Document | None = None) -> Document:
        """
        Find a document by its ID.

        String IDs that are valid ObjectIds are cast to ObjectId.

        Raises:
            DatabaseOperationError: 404 if no document has this ID
        """
        try:
            document = await self._collection.find_one({ID_FIELD: to_object_id(id)}, projection)
        except DATABASE_ERRORS as e:
            self._handle_database_error(e, "find_by_id")

        if document is None:
            raise DatabaseOperationError(
                NOT_FOUND_MESSAGE.format(id=id),
                status_code=status.HTTP_404_NOT_FOUND,
                context={"collection_name": self.collection_name},
            )
        return document

    @repository_operation
    async def find_one(
        self, filter: Document, projection: Document | None = None
    ) -> Document | None:
        """Find the first document matching a filter, or None."""
        try:
            return await self._collection.find_one(filter, projection)
        except DATABASE_ERRORS as e:
            self._handle_database_error(e, "find_one")

    @repository_operation
    async def full_text_search(self, search_text: str, search_field: str) -> list[Document]:
        """
        Case-insensitive regex search on a single field.

        ``search_text`` is used as a regular expression, not escaped.
        """
        search_query = {search_field: {"$regex": search_text, "$options": "i"}}
        try:
            return await self._collection.find(search_query).to_list(length=None)
        except DATABASE_ERRORS as e:
            self._handle_database_error(e, "full_text_search")

    @repository_operation
    async def count(self, filter: Document | None = None) -> int:
        """Count documents matching a filter."""
        try:
            return await self._collection.count_documents(filter or {})
        except DATABASE_ERRORS as e:
            self._handle_database_error(e, "count")

    @repository_operation
    async def distinct_values(self, field: str, filter: Document | None = None) -> list[Any]:
        """Distinct values of ``field`` among documents matching a filter."""
        try:
            return await self._collection.distinct(field, filter or {})
        except DATABASE_ERRORS as e:
            self._handle_database_error(e, "distinct_values")

    # Update

    @repository_operation
    async def update_one(self, filter: Document, update: Document) -> int:
        """
        Update the first document matching a filter.

        Plain fields in ``update`` are applied with ``$set``.

        Returns:
            Number of modified documents (0 or 1)
        """
        try:
            result = await self._collection.update_one(filter, cast_update(update))
        except DATABASE_ERRORS as e:
            self._handle_database_error(e, "update_one")
        return result.modified_count or 0

    @repository_operation
    async def update_many(self, filter: Document, update: Document) -> int:
        """
        Update all documents matching a filter.

        Returns:
            Number of modified documents
        """
        try:
            result = await self._collection.update_many(filter, cast_update(update))
        except DATABASE_ERRORS as e:
            self._handle_database_error(e, "update_many")
        return result.modified_count or 0

    @repository_operation
    async def find_one_and_update(self, filter: Document, update: Document) -> Document | None:
        """
        Update the first document matching a filter and return it after the update.

        Returns:
            The updated document, or None if nothing matched
        """
        try:
            return await self._collection.find_one_and_update(
                filter,
                cast_update(update),
                return_document=ReturnDocument.AFTER,
            )
        except DATABASE_ERRORS as e:
            self._handle_database_error(e, "find_one_and_update")

    @repository_operation
    async def update_by_id(self, id: Any, update: Document) -> Document:
        """
        Update a document by ID with optimistic concurrency control.

        The read, version check and write run in one transaction. If
        ``update`` carries the version key (at top level or inside ``$set``), it
        must equal the stored version.
        The stored version is incremented on every successful update.

        Args:
            id: Document ID
            update: Fields or update operators to apply

        Returns:
            The document after the update

        Raises:
            DatabaseOperationError: 404 if the document does not exist, 409 on
                a version mismatch, or the translated driver error
        """
        object_id = to_object_id(id)
        session = await self.start_transaction()

        try:
            existing = await self._collection.find_one({ID_FIELD: object_id}, session=session)
            if existing is None:
                raise DatabaseOperationError(
                    NOT_FOUND_MESSAGE.format(id=id),
                    status_code=status.HTTP_404_NOT_FOUND,
                    context={"collection_name": self.collection_name},
                )

            updated = await self._collection.find_one_and_update(
                {ID_FIELD: object_id},
                self._versioned_update(existing, update),
                return_document=ReturnDocument.AFTER,
                session=session,
            )

            await session.commit_transaction()
        except BaseException as e:
            await self._discard_session(session)
            if isinstance(e, DATABASE_ERRORS):
                self._handle_database_error(e, "update_by_id")
            raise

        await self._end_session(session)
        return updated

    def _versioned_update(self, existing: Document, update: Document) -> Document:
        # The expected version may be given at top level or inside $set.
        if self._version_key is None:
            return cast_update(update)

        update = dict(update)
        expected_version = update.pop(self._version_key, None)
        if isinstance(update.get("$set"), dict) and self._version_key in update["$set"]:
            update["$set"] = dict(update["$set"])
            set_version = update["$set"].pop(self._version_key)
            if expected_version is None:
                expected_version = set_version
        current_version = existing.get(self._version_key) or 0

        if expected_version is not None and expected_version != current_version:
            raise DatabaseOperationError(
                CONCURRENCY_CONFLICT_MESSAGE,
                status_code=status.HTTP_409_CONFLICT,
                context={
                    "collection_name": self.collection_name,
                    "expected_version": expected_version,
                    "current_version": current_version,
                },
            )

        versioned = cast_update(update)
        versioned.setdefault("$set", {})[self._version_key] = current_version + 1
        return versioned

    # Delete

    @repository_operation
    async def delete_one(self, filter: Document) -> bool:
        """Delete the first document matching a filter. True if one was deleted."""
        try:
            result = await self._collection.delete_one(filter)
        except DATABASE_ERRORS as e:
            self._handle_database_error(e, "delete_one")
        return result.deleted_count >= 1

    @repository_operation
    async def delete_many(self, filter: Document) -> bool:
        """Delete all documents matching a filter. True if any were deleted."""
        try:
            result = await self._collection.delete_many(filter)
        except DATABASE_ERRORS as e:
            self._handle_database_error(e, "delete_many")
        return result.deleted_count >= 1

    # Transaction and session management

    @repository_operation
    async def start_transaction(self) -> AsyncIOMotorClientSession:
        """
        Start a client session with an open transaction.

        Pass the session to Motor calls on ``repository.collection`` and finish
        it with commit_transaction/abort_transaction and end_transaction.
        """
        try:
            session = await self._collection.database.client.start_session()
        except DATABASE_ERRORS as e:
            self._handle_database_error(e, "start_transaction")

        try:
            session.start_transaction()
        except DATABASE_ERRORS as e:
            await self._end_session(session)
            self._handle_database_error(e, "start_transaction")

        logger.debug(f"Started transaction on '{self.collection_name}'")
        return session

    @repository_operation
    async def commit_transaction(self, session: AsyncIOMotorClientSession) -> None:
        """
        Commit the session's transaction.

        On failure the transaction is aborted, the session ended and the error
        translated.
        """
        try:
            await session.commit_transaction()
        except DATABASE_ERRORS as e:
            await self._discard_session(session)
            self._handle_database_error(e, "commit_transaction")

    @repository_operation
    async def abort_transaction(self, session: AsyncIOMotorClientSession) -> None:
        """
        Abort the session's transaction.

        On failure the session is ended and the error translated.
        """
        try:
            await session.abort_transaction()
        except DATABASE_ERRORS as e:
            await self._end_session(session)
            self._handle_database_error(e, "abort_transaction")

    @repository_operation
    async def end_transaction(self, session: AsyncIOMotorClientSession) -> None:
        """End the session without committing or aborting."""
        await session.end_session()

    async def _discard_session(self, session: AsyncIOMotorClientSession) -> None:
        """Abort and end a session during error cleanup without raising."""
        if session.in_transaction:
            try:
                await session.abort_transaction()
                logger.debug(f"Aborted transaction on '{self.collection_name}'")
            except DATABASE_ERRORS as e:
                logger.debug(f"Abort failed on '{self.collection_name}': {e}")
        await self._end_session(session)

    async def _end_session(self, session: AsyncIOMotorClientSession) -> None:
        try:
            await session.end_session()
        except DATABASE_ERRORS as e:
            logger.debug(f"Ending session failed on '{self.collection_name}': {e}")

    # Additional operations

    @repository_operation
    async def aggregate(self, pipeline: list[Document]) -> list[Document]:
        """
        Run an aggregation pipeline on the collection.

        Args:
            pipeline: MongoDB aggregation pipeline

        Returns:
            List of result documents
        """
        try:
            return await self._collection.aggregate(pipeline).to_list(length=None)
        except DATABASE_ERRORS as e:
            self._handle_database_error(e, "aggregate")

    @repository_operation
    async def is_database_connected(self) -> bool:
        """Ping the server. Returns False instead of raising on any failure."""
        try:
            await asyncio.wait_for(
                self._collection.database.client.admin.command("ping"),
                timeout=self._ping_timeout_seconds,
            )
            return True
        except (PyMongoError, asyncio.TimeoutError, AttributeError, TypeError) as e:
            logger.debug(f"Database ping failed for '{self.collection_name}': {e}")
            return False

    # Helpers

    def _prepare_document(self, entity: Document | BaseModel) -> Document:
        if isinstance(entity, BaseModel):
            document = entity.model_dump(by_alias=True, exclude_none=True)
        elif self._document_model is not None:
            document = self._document_model.model_validate(entity).model_dump(
                by_alias=True, exclude_none=True
            )
        else:
            document = dict(entity)

        if self._version_key is not None:
            document.setdefault(self._version_key, 0)
        return document

    def _handle_database_error(self, error: Exception, operation: str) -> NoReturn:
        context = {"operation": operation, "collection_name": self.collection_name}
        translated = translate_database_error(error, context=context)

        if self._log_errors:
            log_operation(
                logger,
                operation,
                level=logging.ERROR,
                success=False,
                message=f"Database Error: {type(error).__name__} - {error}",
                error_type=type(error).__name__,
                error_code=translated.error_code,
                status_code=translated.status_code,
                collection_name=self.collection_name,
            )

        raise translated from error
