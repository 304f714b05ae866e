"""
Pagination request and result models.

Dependencies: pydantic
System role: Typed paging window for BaseRepository.find_all()
"""

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

R = TypeVar("R")


class SortDirection(str, Enum):
    """Sort order applied to sort_by."""

    ASC = "asc"
    DESC = "desc"


class PageRequest(BaseModel):
    """
    Paging window and ordering for a list query.

    The window skips (page - 1) * per_page rows and returns at most per_page.
    Without sort_by the store's default order applies.
    """

    page: int = Field(default=1, ge=1, description="1-based page number")
    per_page: int = Field(default=10, ge=1, description="Rows per page")
    sort_by: str | None = Field(default=None, description="Column to order by")
    sort_direction: SortDirection = Field(default=SortDirection.ASC)

    @property
    def skip(self) -> int:
        """Number of matching rows before the window."""
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        """Maximum number of rows in the window."""
        return self.per_page


class PageResult(BaseModel, Generic[R]):
    """One page of results plus the total number of matches."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: list[R]
    total_count: int = Field(ge=0)
