from .collection import PagedCollection, Query
from .config import CollectionOptions
from .exceptions import (
    ItemValidationError,
    NoRunningLoopError,
    PagedCollectionError,
    QueryContractError,
    StaleLoadError,
)
from .pagination import LoadResult
from .state import LoadingState

__all__ = [
    "PagedCollection",
    "Query",
    "LoadResult",
    "LoadingState",
    "CollectionOptions",
    # Exceptions
    "PagedCollectionError",
    "QueryContractError",
    "ItemValidationError",
    "StaleLoadError",
    "NoRunningLoopError",
]
