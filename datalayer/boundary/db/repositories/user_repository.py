"""
User repository.

Extends BaseRepository with user lookups that keep the password hash out
of the loaded entity.

Dependencies: datalayer.boundary.db.repositories.base_repository
System role: User persistence operations
"""

from uuid import UUID

from datalayer.boundary.db.models.user_model import UserModel
from datalayer.boundary.db.repositories.base_repository import BaseRepository
from datalayer.boundary.db.session_manager import SessionFactory

# Columns never loaded for profile reads
PRIVATE_FIELDS = {"password": 0}


class UserRepository(BaseRepository[UserModel]):
    """Repository for UserModel."""

    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        """Initialize UserRepository with UserModel."""
        super().__init__(UserModel, session_factory)

    async def get_profile(self, user_id: UUID) -> UserModel | None:
        """
        Retrieve a user without the password column.

        Args:
            user_id: User UUID

        Returns:
            UserModel with password deferred, None if not found
        """
        return await self.find_by_id(user_id, projection=PRIVATE_FIELDS)

    async def get_by_email(self, email: str) -> UserModel | None:
        """
        Retrieve a user by login email.

        Args:
            email: Email address (exact match)

        Returns:
            UserModel if found, None otherwise
        """
        return await self.find_one({"email": email})
