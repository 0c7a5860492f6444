"""
Database connection helpers.
"""

from .connection import close_shared_client, get_collection, get_shared_mongo_client

__all__ = ["close_shared_client", "get_collection", "get_shared_mongo_client"]
