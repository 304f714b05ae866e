"""
Unit of work spanning several repositories.

Opens one session, attaches it to every participating repository as a
manual session, and owns its transaction: commit when the block completes,
roll back when it raises. The session is always closed and the repositories
detached afterwards, so they can be reused outside the unit of work.

Dependencies: sqlalchemy.ext.asyncio, datalayer.boundary.db.repositories
System role: Cross-repository transaction boundary
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from datalayer.boundary.db.repositories.base_repository import BaseRepository
from datalayer.boundary.db.session_manager import SessionFactory

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    Async context manager sharing one transaction across repositories.

    Attributes:
        repositories: Repositories attached to the shared session
        session_factory: Factory the shared session is created from
        session: The shared session while the block runs, else None

    Usage:
        users = UserRepository(factory)
        wallets = WalletRepository(factory)
        async with UnitOfWork(users, wallets):
            await users.update({"id": user_id}, {"profile": {"name": "X"}})
            await wallets.update({"user_id": user_id}, {"balance": 0})
    """

    def __init__(
        self,
        *repositories: BaseRepository[Any],
        session_factory: SessionFactory | None = None,
    ) -> None:
        """
        Initialize unit of work.

        Args:
            *repositories: Repositories that take part in the transaction
            session_factory: Factory for the shared session (defaults to the
                first repository's factory)

        Raises:
            ValueError: If neither repositories nor a session factory are given
        """
        if session_factory is None:
            if not repositories:
                raise ValueError("UnitOfWork needs at least one repository or a session_factory")
            session_factory = repositories[0].sessions.session_factory
        self.repositories = repositories
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> "UnitOfWork":
        self.session = self.session_factory()
        await self.session.begin()
        for repository in self.repositories:
            repository.attach_session(self.session)
        logger.debug(
            f"{__name__}:__aenter__ - Shared session attached to {len(self.repositories)} repositories"
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        try:
            if exc_type is None:
                await self.commit()
            else:
                logger.info(f"{__name__}:__aexit__ - Rolling back after {exc_type.__name__}")
                await self.rollback()
        finally:
            for repository in self.repositories:
                await repository.end_session()
            session, self.session = self.session, None
            if session is not None:
                await session.close()
        return False

    async def commit(self) -> None:
        """Commit the shared transaction if one is in progress."""
        if self.session is not None and self.session.in_transaction():
            await self.session.commit()

    async def rollback(self) -> None:
        """Roll back the shared transaction if one is in progress."""
        if self.session is not None and self.session.in_transaction():
            await self.session.rollback()
