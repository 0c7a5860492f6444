"""
Utility functions and helpers for MDB_REPOSITORY.
"""

from .mongo import cast_update, clean_mongo_doc, clean_mongo_docs, to_object_id

__all__ = ["cast_update", "clean_mongo_doc", "clean_mongo_docs", "to_object_id"]
