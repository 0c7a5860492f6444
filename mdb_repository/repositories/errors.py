"""
Driver error translation.

Maps exceptions raised by pymongo/bson (and pydantic document validation) to
DatabaseOperationError with a fixed HTTP status. Known MongoDB error codes
become 400 responses with a fixed message; everything else is a generic 500.
"""

from typing import Any

from bson.errors import BSONError
from fastapi import status
from pydantic import ValidationError
from pymongo.errors import BulkWriteError, PyMongoError

from ..constants import (
    DEFAULT_ERROR_MESSAGE,
    DUPLICATE_KEY_CODE,
    KNOWN_ERROR_MESSAGES,
    VALIDATION_FAILED_MESSAGE,
    VALIDATION_FAILED_STATUS,
)
from ..exceptions import DatabaseOperationError

DATABASE_ERRORS: tuple[type[Exception], ...] = (PyMongoError, BSONError, ValidationError)
"""Exception types the repository translates. Anything else propagates as-is."""


def _error_details(error: Exception) -> dict[str, Any]:
    details = getattr(error, "details", None) or {}
    if isinstance(error, BulkWriteError):
        # Bulk inserts report per-document failures; the first one decides.
        write_errors = details.get("writeErrors") or []
        return write_errors[0] if write_errors else {}
    return details if isinstance(details, dict) else {}


def get_error_code(error: Exception) -> int | None:
    """
    Return the numeric MongoDB error code carried by an exception.

    For BulkWriteError the code of the first write error is used, so a
    duplicate key inside insert_many classifies as 11000 rather than 65.
    """
    if isinstance(error, BulkWriteError):
        code = _error_details(error).get("code")
        if code is not None:
            return code
    return getattr(error, "code", None)


def _duplicate_key_message(error: Exception) -> str:
    key_value = _error_details(error).get("keyValue")
    if key_value:
        return f"{next(iter(key_value.values()))} already exists"
    return KNOWN_ERROR_MESSAGES[DUPLICATE_KEY_CODE]


def translate_database_error(
    error: Exception, context: dict[str, Any] | None = None
) -> DatabaseOperationError:
    """
    Build the DatabaseOperationError for a driver exception.

    Args:
        error: Exception raised by the driver or by document validation
        context: Extra context stored on the translated error

    Returns:
        DatabaseOperationError with status code, message and error code set

    Example:
        try:
            await collection.insert_one(doc)
        except DATABASE_ERRORS as e:
            raise translate_database_error(e) from e
    """
    if isinstance(error, ValidationError):
        return DatabaseOperationError(
            VALIDATION_FAILED_MESSAGE,
            status_code=VALIDATION_FAILED_STATUS,
            context=context,
        )

    code = get_error_code(error)

    if code == DUPLICATE_KEY_CODE:
        message = _duplicate_key_message(error)
        status_code = status.HTTP_400_BAD_REQUEST
    elif code in KNOWN_ERROR_MESSAGES:
        message = KNOWN_ERROR_MESSAGES[code]
        status_code = status.HTTP_400_BAD_REQUEST
    else:
        message = DEFAULT_ERROR_MESSAGE
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    return DatabaseOperationError(
        message,
        status_code=status_code,
        error_code=code,
        context=context,
    )
