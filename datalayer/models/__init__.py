"""
Request and result models for repository operations.
"""

from datalayer.models.pagination import PageRequest, PageResult, SortDirection
from datalayer.models.results import UpdateResult

__all__ = ["PageRequest", "PageResult", "SortDirection", "UpdateResult"]
