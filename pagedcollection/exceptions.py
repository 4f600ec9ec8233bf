from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from pydantic import ValidationError as PydanticValidationError


class PagedCollectionError(Exception):
    """Base exception for all pagedcollection errors."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class QueryContractError(PagedCollectionError):
    """Raised when a query function returns something other than an awaitable sequence."""

    def __init__(
        self, message: str, value: Any | None = None, original_error: Exception | None = None
    ) -> None:
        super().__init__(message, original_error)
        self.value = value


class ItemValidationError(PagedCollectionError):
    """Raised when a batch returned by the query does not match the collection's item_type."""

    def __init__(
        self,
        message: str,
        item_type: Any | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.item_type = item_type


class StaleLoadError(PagedCollectionError):
    """Result of a load attempt that settled after a newer refresh() invalidated it."""

    def __init__(self, generation: int, current_generation: int) -> None:
        super().__init__(
            f"Load from generation {generation} discarded "
            f"(collection is at generation {current_generation})"
        )
        self.generation = generation
        self.current_generation = current_generation


class NoRunningLoopError(PagedCollectionError):
    """Raised when a load is requested outside of a running asyncio event loop."""

    def __init__(
        self,
        message: str = "PagedCollection loads require a running asyncio event loop",
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)


@contextmanager
def translate_validation_errors(item_type: Any | None = None) -> Generator[None, None, None]:
    """
    Context manager that catches pydantic.ValidationError
    and raises ItemValidationError instead.

    Args:
        item_type: Optional item type for better error messages

    Usage:
        with translate_validation_errors(item_type=User):
            adapter.validate_python(batch)
    """
    try:
        yield
    except PydanticValidationError as e:
        type_name = getattr(item_type, "__name__", repr(item_type))
        raise ItemValidationError(
            message=f"Batch failed validation as {type_name} ({e.error_count()} errors)",
            item_type=item_type,
            original_error=e,
        ) from e
