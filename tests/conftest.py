"""
Shared test fixtures and configuration for entire test suite.

Provides: file-backed SQLite async database, session factory, repositories,
mock sessions, and a Wallet model used for cross-repository transactions.
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import pytest
from sqlalchemy import ForeignKey, Integer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Mapped, mapped_column, relationship

from datalayer.boundary.db.base import Base, TimestampMixin, UUIDMixin
from datalayer.boundary.db.models import MessageModel, UserModel  # noqa: F401
from datalayer.boundary.db.repositories import (
    BaseRepository,
    MessageRepository,
    UserRepository,
)


class WalletModel(Base, UUIDMixin, TimestampMixin):
    """Wallet model used only by tests to span two repositories."""

    __tablename__ = "wallets"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    balance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    owner = relationship("UserModel", foreign_keys=[user_id])


class WalletRepository(BaseRepository[WalletModel]):
    """Repository for WalletModel."""

    def __init__(self, session_factory) -> None:
        super().__init__(WalletModel, session_factory)


@pytest.fixture
async def engine(tmp_path: Path):
    """
    Create a file-backed SQLite async database with all tables.

    A file database (rather than :memory:) gives each session its own
    connection, so concurrent reads behave as they would on a server.

    Yields:
        AsyncEngine: Engine bound to a temporary database
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'datalayer.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    """Session factory configured like get_async_session_factory()."""
    return async_sessionmaker(engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def user_repository(session_factory) -> UserRepository:
    """Provide UserRepository bound to the test database."""
    return UserRepository(session_factory)


@pytest.fixture
def message_repository(session_factory) -> MessageRepository:
    """Provide MessageRepository bound to the test database."""
    return MessageRepository(session_factory)


@pytest.fixture
def wallet_repository(session_factory) -> WalletRepository:
    """Provide WalletRepository bound to the test database."""
    return WalletRepository(session_factory)


@pytest.fixture
async def alice(user_repository: UserRepository) -> UserModel:
    """Persisted user 'alice'."""
    return await user_repository.create(
        {
            "email": "alice@example.com",
            "username": "alice",
            "password": "hashed-alice",
            "interests": ["chess"],
            "profile": {"name": "Alice", "height": 170},
        }
    )


@pytest.fixture
async def bob(user_repository: UserRepository) -> UserModel:
    """Persisted user 'bob'."""
    return await user_repository.create(
        {
            "email": "bob@example.com",
            "username": "bob",
            "password": "hashed-bob",
        }
    )


@pytest.fixture
def mock_session() -> AsyncSession:
    """
    Provide mock async database session.

    begin() is synchronous on AsyncSession (it returns an awaitable
    transaction), so it is replaced with an AsyncMock to be awaitable.
    """
    session = AsyncMock(spec=AsyncSession)
    session.begin = AsyncMock()
    session.in_transaction = MagicMock(return_value=True)
    return session


@pytest.fixture
def mock_session_factory(mock_session: AsyncSession) -> MagicMock:
    """Session factory returning mock_session."""
    return MagicMock(return_value=mock_session)
