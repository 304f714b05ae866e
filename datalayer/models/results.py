"""
Write operation result models.

Dependencies: pydantic
System role: Before/after snapshots returned by update operations
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class UpdateResult(BaseModel, Generic[T]):
    """
    Record state around an update.

    Attributes:
        before: Record as it was before the write (None when nothing matched)
        after: For update(), a plain dict of before's columns merged with the
            patch; never re-read from the store. For update_or_create() when a
            record was created, the persisted model instance.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    before: T | None = None
    after: T | dict[str, Any] | None = None
