"""
Base repository for SQLAlchemy models.

Provides generic, session-aware Create, Read, Update, Delete and paginated
query operations that model-specific repositories inherit and extend.

Every operation runs on the repository's active session when one exists
(attached by the caller or created via ensure_session()); otherwise it runs
in a short-lived session of its own that commits on success. No operation
begins or commits a transaction on the active session.

Dependencies: sqlalchemy, datalayer.boundary.db.session_manager,
    datalayer.boundary.db.query_builder
System role: Foundation for all database repositories
"""

import asyncio
import inspect
import logging
from collections.abc import Mapping
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Generic, Iterable, TypeVar
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from datalayer.boundary.db.base import Base
from datalayer.boundary.db.connection import get_async_session_factory
from datalayer.boundary.db.query_builder import Filter, Projection, QueryBuilder
from datalayer.boundary.db.session_manager import SessionFactory, SessionManager
from datalayer.configs import get_settings
from datalayer.core.exceptions import ConflictError
from datalayer.core.populate import PopulateSpec
from datalayer.models.pagination import PageRequest, PageResult
from datalayer.models.results import UpdateResult

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
R = TypeVar("R")

# SQLSTATE 23505 (PostgreSQL unique_violation); SQLite reports it in the message
_UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """
    Whether an IntegrityError was caused by a unique constraint.

    Args:
        error: Error raised by a flush

    Returns:
        bool: True for duplicate key violations, False for other integrity errors
    """
    orig = error.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate:
        return sqlstate == _UNIQUE_VIOLATION_SQLSTATE
    message = str(orig).lower()
    return "unique" in message or "duplicate" in message


class BaseRepository(Generic[ModelT]):
    """
    Generic repository for one SQLAlchemy model.

    Holds the per-unit-of-work session state through a SessionManager, so an
    instance must not be shared between concurrent tasks. Create one per
    request or per UnitOfWork.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        sessions: Session lifecycle manager for this repository
        query: Statement builder bound to the model
    """

    def __init__(self, model: type[ModelT], session_factory: SessionFactory | None = None) -> None:
        """
        Initialize repository for a model.

        Args:
            model: SQLAlchemy model class for database operations
            session_factory: Factory for automatic and ephemeral sessions
                (defaults to the configured async_sessionmaker)
        """
        if session_factory is None:
            session_factory = get_async_session_factory()
        self._model = model
        self.sessions = SessionManager(session_factory)
        self.query: QueryBuilder[ModelT] = QueryBuilder(model)

    @property
    def model(self) -> type[ModelT]:
        """The raw model class."""
        return self._model

    # Session handling

    @property
    def session(self) -> AsyncSession | None:
        """The active session, or None."""
        return self.sessions.session

    @property
    def is_manual(self) -> bool:
        """Whether the active session was attached by the caller."""
        return self.sessions.is_manual

    def attach_session(self, session: AsyncSession) -> "BaseRepository[ModelT]":
        """
        Run following operations on a caller-owned session.

        Args:
            session: Session whose transaction the caller controls

        Returns:
            BaseRepository: self, for chaining
        """
        self.sessions.attach_session(session)
        return self

    async def end_session(self) -> None:
        """Close an automatic session (or detach a manual one) and clear state."""
        await self.sessions.end_session()

    async def ensure_session(self) -> AsyncSession | None:
        return await self.sessions.ensure_session()

    async def begin_transaction(self) -> None:
        await self.sessions.begin_transaction()

    async def commit_transaction(self) -> None:
        await self.sessions.commit()

    async def abort_transaction(self) -> None:
        await self.sessions.abort()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["BaseRepository[ModelT]"]:
        """
        Run a block of operations in one transaction on this repository.

        Commits when the block completes and aborts when it raises. Inside a
        UnitOfWork (manual session) the outer transaction is left alone.

        Yields:
            BaseRepository: self

        Usage:
            async with users.transaction():
                await users.update({"id": user_id}, {"username": "new"})
                await users.delete({"id": other_id})
        """
        async with self.sessions.transaction():
            yield self

    # CRUD operations

    async def create(self, doc: Mapping[str, Any]) -> ModelT:
        """
        Create a new record.

        Args:
            doc: Model field values

        Returns:
            Created model instance with generated ID and defaults

        Raises:
            ConflictError: If a unique constraint is violated
            InvalidFieldError: If doc names an unknown column
        """
        async with self.sessions.scope() as session:
            return await self._create(session, doc)

    async def _create(self, session: AsyncSession, doc: Mapping[str, Any]) -> ModelT:
        instance = self.model(**self.query.values(doc))
        session.add(instance)
        try:
            await session.flush()
        except IntegrityError as e:
            if not is_unique_violation(e):
                raise
            logger.info(f"{__name__}:create - Duplicate {self.query.model_name}: {e.orig}")
            raise ConflictError(
                "Duplicate record",
                model=self.query.model_name,
                details={"error": str(e.orig)},
            ) from e
        await session.refresh(instance)
        return instance

    async def find_all(
        self,
        filter: Filter | None = None,
        page_request: PageRequest | None = None,
        populate: str | None = None,
        projection: Projection | None = None,
        transform: Callable[[ModelT], R | Awaitable[R]] | None = None,
        populate_specs: Iterable[PopulateSpec] | None = None,
    ) -> PageResult[R]:
        """
        Find one page of records plus the total number of matches.

        The page fetch and the count run concurrently on separate short-lived
        sessions when no session is active; on an active session they run one
        after the other, since an AsyncSession serves one operation at a time.

        Args:
            filter: Row filter
            page_request: Page, page size and ordering (settings defaults if None)
            populate: Populate mini-language string for eager loading
            projection: Column projection
            transform: Applied to each record (sync or async); identity if None
            populate_specs: Pre-built populate trees, merged with populate

        Returns:
            PageResult: Transformed page items and total_count over all matches
        """
        if page_request is None:
            defaults = get_settings().repository
            page_request = PageRequest(page=defaults.default_page, per_page=defaults.default_per_page)

        stmt = self.query.build_select(
            filter,
            page_request=page_request,
            populate=populate,
            populate_specs=populate_specs,
            projection=projection,
        )

        if self.session is None:
            records, total_count = await asyncio.gather(
                self._fetch_all(stmt),
                self.count_documents(filter),
            )
        else:
            records = await self._fetch_all(stmt)
            total_count = await self.count_documents(filter)

        items = await self._apply_transform(records, transform)
        return PageResult(items=items, total_count=total_count)

    async def _fetch_all(self, stmt) -> list[ModelT]:
        async with self.sessions.scope() as session:
            return await self.query.fetch_all(session, stmt)

    @staticmethod
    async def _apply_transform(
        records: list[ModelT],
        transform: Callable[[ModelT], Any] | None,
    ) -> list[Any]:
        if transform is None:
            return list(records)
        items = []
        for record in records:
            item = transform(record)
            if inspect.isawaitable(item):
                item = await item
            items.append(item)
        return items

    async def count_documents(self, filter: Filter | None = None) -> int:
        """
        Count records matching a filter.

        Args:
            filter: Row filter (None counts every record)

        Returns:
            int: Number of matching records
        """
        async with self.sessions.scope() as session:
            return await self.query.count(session, filter)

    async def find_one(
        self,
        filter: Filter | None = None,
        populate: str | None = None,
        projection: Projection | None = None,
        populate_specs: Iterable[PopulateSpec] | None = None,
    ) -> ModelT | None:
        """
        Find the first record matching a filter.

        Args:
            filter: Row filter
            populate: Populate mini-language string for eager loading
            projection: Column projection
            populate_specs: Pre-built populate trees

        Returns:
            Model instance if found, None otherwise
        """
        stmt = self.query.build_select(
            filter,
            populate=populate,
            populate_specs=populate_specs,
            projection=projection,
        )
        async with self.sessions.scope() as session:
            return await self.query.fetch_first(session, stmt)

    async def find_by_id(
        self,
        id: UUID | str,
        populate: str | None = None,
        projection: Projection | None = None,
        populate_specs: Iterable[PopulateSpec] | None = None,
    ) -> ModelT | None:
        """
        Find a record by primary key.

        Args:
            id: Primary key as a UUID or its string form
            populate: Populate mini-language string for eager loading
            projection: Column projection
            populate_specs: Pre-built populate trees

        Returns:
            Model instance if found, None otherwise

        Raises:
            ValueError: If id is a string that is not a valid UUID
        """
        if isinstance(id, str):
            id = UUID(id)
        return await self.find_one(
            [self.query.primary_key() == id],
            populate=populate,
            projection=projection,
            populate_specs=populate_specs,
        )

    async def update(self, filter: Filter, patch: Mapping[str, Any]) -> UpdateResult[ModelT]:
        """
        Update the first record matching a filter.

        The record is read with a row lock and patched in the same transaction.
        `before` is a detached snapshot of the record prior to the write.
        `after` is NOT read back from the store: it is before's column dict
        shallow-merged with patch. Values the store computes during the write
        (onupdate timestamps, server defaults, triggers) are therefore absent
        from or stale in `after`.

        Args:
            filter: Row filter
            patch: Column name to new value

        Returns:
            UpdateResult: before/after, both None when nothing matched
        """
        values = self.query.values(patch)
        async with self.sessions.scope() as session:
            instance = await self._find_for_update(session, filter)
            if instance is None:
                return UpdateResult(before=None, after=None)
            return await self._apply_patch(session, instance, values)

    async def update_or_create(self, filter: Filter, patch: Mapping[str, Any]) -> UpdateResult[ModelT]:
        """
        Update the first record matching a filter, or create one from patch.

        When a record matches, behaves like update(). Otherwise a record is
        created from patch alone (filter values are not copied into it) and
        `after` is the persisted instance.

        Args:
            filter: Row filter
            patch: Column name to new value

        Returns:
            UpdateResult: before=None and after=<created> when nothing matched

        Raises:
            ConflictError: If the created record violates a unique constraint
        """
        values = self.query.values(patch)
        async with self.sessions.scope() as session:
            instance = await self._find_for_update(session, filter)
            if instance is None:
                created = await self._create(session, values)
                return UpdateResult(before=None, after=created)
            return await self._apply_patch(session, instance, values)

    async def _find_for_update(self, session: AsyncSession, filter: Filter) -> ModelT | None:
        stmt = self.query.build_select(filter).with_for_update()
        return await self.query.fetch_first(session, stmt)

    async def _apply_patch(
        self,
        session: AsyncSession,
        instance: ModelT,
        values: dict[str, Any],
    ) -> UpdateResult[ModelT]:
        before_values = instance.to_dict()
        before = self.model(**before_values)

        for key, value in values.items():
            setattr(instance, key, value)
        await session.flush()

        return UpdateResult(before=before, after={**before_values, **values})

    async def delete(self, filter: Filter) -> ModelT | None:
        """
        Delete the first record matching a filter.

        Args:
            filter: Row filter

        Returns:
            The deleted instance, None if nothing matched
        """
        async with self.sessions.scope() as session:
            instance = await self._find_for_update(session, filter)
            if instance is None:
                return None
            await session.delete(instance)
            await session.flush()
            return instance
