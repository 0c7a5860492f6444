"""
MongoDB utility functions for MDB_REPOSITORY.

This module provides helpers for casting ids and update documents the way the
repository expects them, plus JSON serialization helpers for documents.
"""

from datetime import datetime
from typing import Any

from bson import ObjectId


def to_object_id(id: Any) -> Any:
    """
    Cast an id to ObjectId when it is a valid ObjectId representation.

    Any other value (custom string keys, integers, ObjectId instances) is
    returned unchanged so collections with non-ObjectId keys keep working.

    Example:
        to_object_id("507f1f77bcf86cd799439011")  # ObjectId(...)
        to_object_id("user-42")                    # "user-42"
    """
    if isinstance(id, ObjectId):
        return id
    if isinstance(id, (str, bytes)) and ObjectId.is_valid(id):
        return ObjectId(id)
    return id


def cast_update(
    update: dict[str, Any] | list[dict[str, Any]],
) -> dict[str, Any] | list[dict[str, Any]]:
    """
    Fold plain top-level fields of an update into ``$set``.

    Operator keys (``$inc``, ``$push``, ...) pass through unchanged. An
    existing ``$set`` is merged with the plain fields, plain fields winning.
    Aggregation pipeline updates (lists) are returned as-is. Operator
    documents are copied, so neither the input nor its nested dicts are
    modified.

    Example:
        cast_update({"name": "x", "$inc": {"n": 1}})
        # {"$inc": {"n": 1}, "$set": {"name": "x"}}
    """
    if isinstance(update, list):
        return update

    operators = {
        k: dict(v) if isinstance(v, dict) else v for k, v in update.items() if k.startswith("$")
    }
    fields = {k: v for k, v in update.items() if not k.startswith("$")}

    if fields:
        operators["$set"] = {**operators.get("$set", {}), **fields}

    return operators


def clean_mongo_doc(doc: dict[str, Any] | None) -> dict[str, Any] | None:
    """
    Convert MongoDB document to JSON-serializable format.

    Recursively converts MongoDB-specific types to JSON-compatible types:
    - ObjectId -> str
    - datetime -> ISO format string
    - Nested dictionaries and lists are processed recursively

    Args:
        doc: MongoDB document (dict) or None

    Returns:
        Cleaned document with all MongoDB types converted, or None if input was None

    Example:
        ```python
        @router.get("/users/{user_id}")
        async def get_user(user_id: str):
            return clean_mongo_doc(await users.find_by_id(user_id))
        ```
    """
    if doc is None:
        return None

    if not isinstance(doc, dict):
        return _clean_value(doc)

    return {key: _clean_value(value) for key, value in doc.items()}


def clean_mongo_docs(docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Convert a list of MongoDB documents to JSON-serializable format.

    Args:
        docs: List of MongoDB documents

    Returns:
        List of cleaned documents
    """
    return [clean_mongo_doc(doc) for doc in docs]


def _clean_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return clean_mongo_doc(value)
    if isinstance(value, list):
        return [_clean_value(item) for item in value]
    return value
