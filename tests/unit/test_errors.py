"""
Unit tests for driver error translation.

Tests the error code to HTTP status table and its special cases.
"""

import pytest
from bson.errors import InvalidDocument
from pydantic import BaseModel, ValidationError
from pymongo.errors import (
    BulkWriteError,
    DuplicateKeyError,
    NetworkTimeout,
    OperationFailure,
)

from mdb_repository.exceptions import DatabaseOperationError
from mdb_repository.repositories.errors import get_error_code, translate_database_error


class TestKnownErrorCodes:
    """Test the fixed error code table."""

    @pytest.mark.parametrize(
        "code, message",
        [
            (11001, "Duplicate key error"),
            (12000, "Invalid index specification"),
            (12010, "Cannot build index on a non-existing field"),
            (12102, "Index key too long"),
            (12134, "Index not found"),
        ],
    )
    def test_known_codes_map_to_bad_request(self, code, message):
        """Test that each known code maps to 400 with its fixed message."""
        error = translate_database_error(OperationFailure("driver text", code=code))

        assert error.status_code == 400
        assert error.detail == message
        assert error.error_code == code

    def test_duplicate_key_names_value(self):
        """Test that 11000 reports the first duplicated value."""
        error = translate_database_error(
            DuplicateKeyError(
                "E11000",
                code=11000,
                details={"keyValue": {"email": "john@example.com", "tenant": "a"}},
            )
        )

        assert error.status_code == 400
        assert error.detail == "john@example.com already exists"

    def test_duplicate_key_without_key_value(self):
        """Test that 11000 without keyValue falls back to a fixed message."""
        error = translate_database_error(DuplicateKeyError("E11000", code=11000))

        assert error.status_code == 400
        assert error.detail == "Duplicate key error"


class TestUnknownErrors:
    """Test the generic fallback."""

    def test_unknown_code_is_internal_error(self):
        """Test that unrecognised codes map to 500."""
        error = translate_database_error(OperationFailure("unauthorized", code=13))

        assert error.status_code == 500
        assert error.detail == "Database operation failed"
        assert error.error_code == 13

    def test_error_without_code(self):
        """Test that errors without a code map to 500."""
        error = translate_database_error(NetworkTimeout("timed out"))

        assert error.status_code == 500
        assert error.error_code is None

    def test_bson_error(self):
        """Test that BSON encoding errors map to 500."""
        error = translate_database_error(InvalidDocument("cannot encode object"))
        assert error.status_code == 500


class TestSpecialCases:
    """Test bulk writes, validation errors and context."""

    def test_bulk_write_uses_first_write_error(self):
        """Test that BulkWriteError is classified by its first write error."""
        bulk = BulkWriteError(
            {
                "writeErrors": [
                    {"code": 11000, "keyValue": {"sku": "A-1"}},
                    {"code": 12102},
                ]
            }
        )

        assert get_error_code(bulk) == 11000
        error = translate_database_error(bulk)
        assert error.status_code == 400
        assert error.detail == "A-1 already exists"

    def test_bulk_write_without_write_errors(self):
        """Test that a bulk error without write errors keeps its own code."""
        bulk = BulkWriteError({"writeErrors": [], "writeConcernErrors": [{"code": 64}]})

        assert get_error_code(bulk) == 65
        assert translate_database_error(bulk).status_code == 500

    def test_validation_error_is_unprocessable(self):
        """Test that pydantic validation errors map to 422."""

        class Product(BaseModel):
            sku: str

        with pytest.raises(ValidationError) as exc_info:
            Product.model_validate({})

        error = translate_database_error(exc_info.value)
        assert error.status_code == 422
        assert error.detail == "Document validation failed"

    def test_context_is_attached(self):
        """Test that the context is stored on the translated error."""
        error = translate_database_error(
            OperationFailure("x", code=12134),
            context={"operation": "find", "collection_name": "users"},
        )

        assert isinstance(error, DatabaseOperationError)
        assert error.context == {"operation": "find", "collection_name": "users"}
