"""
MDB Repository Pattern

Provides a generic MongoDB entity repository to subclass per entity, and the
driver error translation it relies on.

Usage:
    from mdb_repository.repositories import EntityRepository

    class UserRepository(EntityRepository):
        async def find_by_email(self, email: str) -> dict | None:
            return await self.find_one({"email": email})

    # In FastAPI routes
    @app.get("/users/{user_id}")
    async def get_user(user_id: str):
        # A missing user raises DatabaseOperationError (404)
        return clean_mongo_doc(await users.find_by_id(user_id))
"""

from .entity import EntityRepository
from .errors import DATABASE_ERRORS, get_error_code, translate_database_error

__all__ = [
    "EntityRepository",
    "DATABASE_ERRORS",
    "get_error_code",
    "translate_database_error",
]
