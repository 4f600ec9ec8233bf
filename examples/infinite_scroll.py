"""
Infinite scroll example

Simulates a UI that keeps asking for more users while the user scrolls,
and a pull-to-refresh halfway through.
"""

import asyncio
import logging

from pydantic import BaseModel

from pagedcollection import LoadingState, LoadResult, PagedCollection


class User(BaseModel):
    id: int
    name: str


USERS = [{"id": i, "name": f"user-{i}"} for i in range(1, 8)]
PAGE_SIZE = 3


async def find_users(offset: int) -> list[dict]:
    """Stand-in for an HTTP call returning raw JSON objects."""
    await asyncio.sleep(0.05)
    return USERS[offset : offset + PAGE_SIZE]


def render(collection: PagedCollection, state: LoadingState) -> None:
    css = {"loading": "loading-style", "failed": "failed-style"}.get(state.value, "")
    print(f"  [{state}] {len(collection)} users {css}")


async def main() -> None:
    users: PagedCollection[User] = PagedCollection(find_users, item_type=User)
    users.subscribe(render)

    # Initial load was started by the constructor
    first = await users.pending_load
    if isinstance(first, LoadResult) and first.first_successful_query:
        print(f"First page: {[u.name for u in users]}")

    # Scroll events fire faster than the API answers; they share one query
    a, b = users.load_more(), users.load_more()
    assert a is b
    await a

    # Keep scrolling until the source runs dry
    while True:
        result = await users.load_more()
        if not isinstance(result, LoadResult) or result.is_empty:
            break

    print(f"Loaded {len(users)} users: {[u.id for u in users]}")

    # Pull to refresh
    users.refresh()
    print(f"After refresh: {len(users)} users, state={users.loading_state}")
    await users.pending_load
    print(f"Reloaded: {[u.name for u in users]}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
