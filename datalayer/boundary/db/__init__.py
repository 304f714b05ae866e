"""
Database boundary layer: ORM models, repositories, sessions and connections.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(): Connection management
  - SessionManager: Per-repository session lifecycle
  - QueryBuilder: Statement assembly from filters, pages, projections and populate trees
  - BaseRepository, UserRepository, MessageRepository: Repositories
  - UnitOfWork: Shared transaction across repositories
  - UserModel, MessageModel: Domain entities

Dependencies: sqlalchemy, datalayer.configs
System role: Database adapter providing session-aware persistence
"""

from datalayer.boundary.db.base import Base, TimestampMixin, UUIDMixin
from datalayer.boundary.db.connection import (
    get_async_engine,
    get_async_session_factory,
)
from datalayer.boundary.db.models import MessageModel, UserModel
from datalayer.boundary.db.query_builder import QueryBuilder
from datalayer.boundary.db.repositories import (
    BaseRepository,
    MessageRepository,
    UserRepository,
)
from datalayer.boundary.db.session_manager import SessionManager
from datalayer.boundary.db.unit_of_work import UnitOfWork

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "MessageModel",
    "UserModel",
    # Query and session machinery
    "QueryBuilder",
    "SessionManager",
    "UnitOfWork",
    # Repositories
    "BaseRepository",
    "MessageRepository",
    "UserRepository",
]
