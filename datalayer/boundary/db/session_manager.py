"""
Session lifecycle management for repositories.

Owns the optional AsyncSession a repository runs its queries through.
A session is either manual (attached by the caller, who owns its
transaction and closing) or automatic (created here from the session
factory and torn down here). While a manual session is attached every
transaction verb is a no-op.

Dependencies: sqlalchemy.ext.asyncio
System role: Transaction scope shared across repository calls
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncSession]


class SessionManager:
    """
    Per-repository session state.

    One instance belongs to one logical unit of work; it must not be shared
    between concurrently running tasks.

    Attributes:
        session_factory: Callable returning a new AsyncSession
            (normally an async_sessionmaker)
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        """
        Initialize with no active session.

        Args:
            session_factory: Factory used for automatic and ephemeral sessions
        """
        self.session_factory = session_factory
        self._session: AsyncSession | None = None
        self._manual = False

    @property
    def session(self) -> AsyncSession | None:
        """The active session, or None."""
        return self._session

    @property
    def is_manual(self) -> bool:
        """Whether the active session was supplied by the caller."""
        return self._manual

    def attach_session(self, session: AsyncSession) -> "SessionManager":
        """
        Use a caller-owned session for every following operation.

        The session is borrowed: it is never begun, committed, rolled back or
        closed here. end_session() detaches it.

        Args:
            session: Session supplied by the caller

        Returns:
            SessionManager: self, for chaining
        """
        self._session = session
        self._manual = True
        logger.debug(f"{__name__}:attach_session - Manual session attached")
        return self

    async def ensure_session(self) -> AsyncSession | None:
        """
        Create an automatic session if none is active.

        Idempotent: an existing session (manual or automatic) is kept.

        Returns:
            AsyncSession | None: The active session
        """
        if self._manual or self._session is not None:
            return self._session
        self._session = self.session_factory()
        logger.debug(f"{__name__}:ensure_session - Automatic session created")
        return self._session

    async def begin_transaction(self) -> None:
        """
        Begin a transaction on the automatic session.

        Beginning while a transaction is already in progress is rejected by
        SQLAlchemy and the error propagates.
        """
        if self._manual:
            return
        if self._session is not None:
            await self._session.begin()

    async def commit(self) -> None:
        """Commit the automatic session's transaction, then end the session."""
        if self._manual:
            return
        try:
            if self._session is not None and self._session.in_transaction():
                await self._session.commit()
        finally:
            await self.end_session()

    async def abort(self) -> None:
        """Roll back the automatic session's transaction, then end the session."""
        if self._manual:
            return
        try:
            if self._session is not None and self._session.in_transaction():
                await self._session.rollback()
        finally:
            await self.end_session()

    async def end_session(self) -> None:
        """
        Close the automatic session and clear all session state.

        A failure while closing is logged and suppressed; the state is cleared
        either way. A manual session is only detached, never closed.
        """
        session = self._session
        try:
            if session is not None and not self._manual:
                await session.close()
        except Exception as e:
            logger.warning(f"{__name__}:end_session - Failed to end session: {type(e).__name__}: {e}")
        finally:
            self._session = None
            self._manual = False

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession | None]:
        """
        Scoped transaction on the repository's session.

        Ensures a session, begins, and commits on normal exit or aborts when
        the block raises. Under a manual session all of this is skipped and the
        caller's session is yielded unchanged.

        Yields:
            AsyncSession | None: The active session

        Usage:
            async with repo.sessions.transaction():
                await repo.create({...})
                await repo.update({...}, {...})
        """
        await self.ensure_session()
        await self.begin_transaction()
        try:
            yield self._session
        except BaseException:
            await self.abort()
            raise
        await self.commit()

    @asynccontextmanager
    async def scope(self) -> AsyncIterator[AsyncSession]:
        """
        Session for a single repository operation.

        Yields the active session untouched when there is one. Otherwise opens
        an ephemeral session whose transaction commits when the block exits
        and rolls back if it raises; the session is always closed.

        Yields:
            AsyncSession: Session to run the operation on
        """
        if self._session is not None:
            yield self._session
            return
        async with self.session_factory() as session:
            async with session.begin():
                yield session
