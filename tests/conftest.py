"""
Shared pytest fixtures and configuration for pagedcollection tests.

This module provides the query doubles and item models used across the
unit tests.
"""

import pytest
from pydantic import BaseModel

from tests.helpers.queries import ControlledQuery, SliceQuery


class User(BaseModel):
    id: int
    name: str


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests with in-memory query functions")


@pytest.fixture
def controlled_query() -> ControlledQuery:
    """A query function whose calls the test settles by hand."""
    return ControlledQuery()


@pytest.fixture
def letters_query() -> SliceQuery:
    """
    Serves ["a", "b", "c"] for offset 0 and ["d", "e"] for offset 3.
    """
    return SliceQuery(["a", "b", "c", "d", "e"], page_size=3)


@pytest.fixture
def user_model() -> type[User]:
    """Pydantic model used for item validation tests."""
    return User


@pytest.fixture
def raw_users() -> list[dict]:
    """Raw user payloads as a JSON API would return them."""
    return [{"id": i, "name": f"user-{i}"} for i in range(1, 6)]
