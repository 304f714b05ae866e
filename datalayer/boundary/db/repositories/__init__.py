"""
Repositories for database models.

Exports the generic BaseRepository and model-specific repositories.
Repositories carry per-unit-of-work session state, so instantiate them per
request (or per UnitOfWork) instead of sharing module-level instances.

Usage:
    from datalayer.boundary.db.repositories import UserRepository

    users = UserRepository(session_factory)
    user = await users.find_by_id(user_id, populate="sent_messages:content")
"""

from datalayer.boundary.db.repositories.base_repository import BaseRepository
from datalayer.boundary.db.repositories.message_repository import MessageRepository
from datalayer.boundary.db.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "MessageRepository",
    "UserRepository",
]
