"""
Load results for Paged Collections.

This module provides the record returned by every successful load attempt,
describing which items were appended and how the collection grew.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    """
    Represents the outcome of one successful load attempt.

    Attributes:
        items: The batch returned by the query, in the order it was appended
        old_length: Length of the collection before the batch was appended
        new_length: Length of the collection after the batch was appended
        first_successful_query: True if this attempt followed a refresh and
            yielded at least one item
    """

    items: list[T]
    old_length: int
    new_length: int
    first_successful_query: bool = False

    @property
    def count(self) -> int:
        """Number of items appended by this attempt."""
        return self.new_length - self.old_length

    @property
    def is_empty(self) -> bool:
        """Returns True if the query returned no items."""
        return not self.items
