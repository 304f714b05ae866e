"""
Query assembly for repository reads and writes.

Translates filters, patches, sort/paging windows, projections and populate
trees into SQLAlchemy statements for one model, and runs them on a given
session.

Dependencies: sqlalchemy, datalayer.core.populate
System role: Bridge between repository arguments and SQLAlchemy statements
"""

from collections.abc import Mapping, Sequence
from typing import Any, Generic, Iterable, TypeVar

from sqlalchemy import ColumnElement, Select, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute, defer, load_only, selectinload
from sqlalchemy.orm.interfaces import LoaderOption

from datalayer.boundary.db.base import Base
from datalayer.core.exceptions import InvalidFieldError, InvalidPopulateError
from datalayer.core.populate import PopulateSpec, parse_populate
from datalayer.models.pagination import PageRequest, SortDirection

ModelT = TypeVar("ModelT", bound=Base)

# Column-name -> value mapping, or ready-made SQLAlchemy boolean clauses
Filter = Mapping[str, Any] | Sequence[ColumnElement[bool]]
# {"field": 1} includes, {"field": 0} excludes; a plain sequence lists included fields
Projection = Mapping[str, Any] | Sequence[str]


class QueryBuilder(Generic[ModelT]):
    """
    Statement builder bound to one model.

    Attributes:
        model: The SQLAlchemy model class statements select from
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize builder for a model.

        Args:
            model: SQLAlchemy model class
        """
        self.model = model

    @property
    def model_name(self) -> str:
        return self.model.__name__

    def column(self, name: str, model: type[Base] | None = None) -> InstrumentedAttribute:
        """
        Resolve a column attribute by name.

        Args:
            name: Column attribute key
            model: Model to resolve against (defaults to the bound model)

        Returns:
            InstrumentedAttribute: The mapped column attribute

        Raises:
            InvalidFieldError: If the model has no such column
        """
        model = model or self.model
        if name not in inspect(model).column_attrs:
            raise InvalidFieldError(model.__name__, name)
        return getattr(model, name)

    def primary_key(self) -> InstrumentedAttribute:
        """Attribute of the model's (first) primary key column."""
        key_column = inspect(self.model).primary_key[0]
        return getattr(self.model, inspect(self.model).get_property_by_column(key_column).key)

    def where(self, filter: Filter | None) -> list[ColumnElement[bool]]:
        """
        Convert a filter into WHERE clauses.

        Mapping values compare by equality; None becomes IS NULL and a
        list/tuple/set becomes IN. A sequence of clauses is passed through.

        Args:
            filter: Filter mapping, clause sequence, or None for no filter

        Returns:
            list[ColumnElement[bool]]: Clauses to AND together
        """
        if not filter:
            return []
        if not isinstance(filter, Mapping):
            return list(filter)

        clauses = []
        for name, value in filter.items():
            column = self.column(name)
            if value is None:
                clauses.append(column.is_(None))
            elif isinstance(value, (list, tuple, set, frozenset)):
                clauses.append(column.in_(list(value)))
            else:
                clauses.append(column == value)
        return clauses

    def values(self, patch: Mapping[str, Any]) -> dict[str, Any]:
        """
        Validate a patch against the model's columns.

        Args:
            patch: Column name to new value

        Returns:
            dict[str, Any]: The patch as a plain dict

        Raises:
            InvalidFieldError: If a key is not a column of the model
        """
        for name in patch:
            self.column(name)
        return dict(patch)

    def projection_options(self, projection: Projection | None) -> list[LoaderOption]:
        """
        Loader options restricting which columns of the model are loaded.

        Args:
            projection: Inclusion/exclusion mapping or list of included fields

        Returns:
            list: load_only() and/or defer() options

        Raises:
            InvalidFieldError: If a field is unknown
            ValueError: If a mapping mixes inclusions and exclusions
        """
        if not projection:
            return []

        if isinstance(projection, Mapping):
            include = [name for name, flag in projection.items() if flag]
            exclude = [name for name, flag in projection.items() if not flag]
            if include and exclude:
                raise ValueError("Projection cannot mix included and excluded fields")
        else:
            include, exclude = list(projection), []

        if include:
            return [load_only(*(self.column(name) for name in include))]
        return [defer(self.column(name)) for name in exclude]

    def populate_options(
        self,
        populate: str | None = None,
        populate_specs: Iterable[PopulateSpec] | None = None,
    ) -> list[LoaderOption]:
        """
        Eager-load options for a populate string and/or pre-built trees.

        Each relationship is loaded with selectinload(); a select on a node
        becomes load_only() on the related model, and children are chained
        through Load.options().

        Args:
            populate: Populate mini-language string
            populate_specs: Already-parsed populate trees

        Returns:
            list: One loader option per top-level node

        Raises:
            InvalidPopulateError: If a segment is not a relationship
            InvalidFieldError: If a select names an unknown column
        """
        specs = parse_populate(populate) + list(populate_specs or [])
        return [self._loader(self.model, spec) for spec in specs]

    def _loader(self, model: type[Base], spec: PopulateSpec) -> LoaderOption:
        relationships = inspect(model).relationships
        if spec.path not in relationships:
            raise InvalidPopulateError(model.__name__, spec.path)
        target = relationships[spec.path].mapper.class_

        loader = selectinload(getattr(model, spec.path))
        sub_options: list[LoaderOption] = []
        if spec.fields:
            sub_options.append(load_only(*(self.column(name, target) for name in spec.fields)))
        sub_options.extend(self._loader(target, child) for child in spec.children)
        if sub_options:
            loader = loader.options(*sub_options)
        return loader

    def build_select(
        self,
        filter: Filter | None = None,
        page_request: PageRequest | None = None,
        populate: str | None = None,
        populate_specs: Iterable[PopulateSpec] | None = None,
        projection: Projection | None = None,
    ) -> Select:
        """
        Assemble a SELECT for the model.

        Args:
            filter: Row filter
            page_request: Sort and paging window (None for all rows)
            populate: Populate mini-language string
            populate_specs: Pre-built populate trees
            projection: Column projection for the model itself

        Returns:
            Select: Executable statement
        """
        stmt = select(self.model).where(*self.where(filter))

        options = self.projection_options(projection) + self.populate_options(populate, populate_specs)
        if options:
            stmt = stmt.options(*options)

        if page_request is not None:
            if page_request.sort_by:
                column = self.column(page_request.sort_by)
                stmt = stmt.order_by(
                    column.desc() if page_request.sort_direction == SortDirection.DESC else column.asc()
                )
            stmt = stmt.offset(page_request.skip).limit(page_request.limit)
        return stmt

    def build_count(self, filter: Filter | None = None) -> Select:
        """SELECT count(*) over the rows matching filter."""
        return select(func.count()).select_from(self.model).where(*self.where(filter))

    async def fetch_all(self, session: AsyncSession, stmt: Select) -> list[ModelT]:
        """Run a select and return every entity."""
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def fetch_first(self, session: AsyncSession, stmt: Select) -> ModelT | None:
        """Run a select and return the first entity, or None."""
        result = await session.execute(stmt.limit(1))
        return result.scalars().first()

    async def count(self, session: AsyncSession, filter: Filter | None = None) -> int:
        """Count rows matching filter."""
        result = await session.execute(self.build_count(filter))
        return result.scalar_one()
