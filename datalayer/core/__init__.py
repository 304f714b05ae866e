"""
Core domain logic: exception hierarchy and the populate mini-language parser.
"""

from datalayer.core.exceptions import (
    ConflictError,
    DataLayerException,
    InvalidFieldError,
    InvalidPopulateError,
    NotFoundError,
    StoreError,
)
from datalayer.core.populate import PopulateSpec, parse_populate

__all__ = [
    "ConflictError",
    "DataLayerException",
    "InvalidFieldError",
    "InvalidPopulateError",
    "NotFoundError",
    "StoreError",
    "PopulateSpec",
    "parse_populate",
]
