"""
Paged Collections.

This module provides the PagedCollection class, a growable sequence bound to an
offset-based query function, with single-flight loading and an observable
loading state.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Iterable, Iterator, Mapping, Sequence
from typing import Any, TypeVar, overload

from pydantic import TypeAdapter

from ._logging import logger, summarize_error
from .config import CollectionOptions
from .exceptions import (
    NoRunningLoopError,
    QueryContractError,
    StaleLoadError,
    translate_validation_errors,
)
from .pagination import LoadResult
from .state import LoadingState

T = TypeVar("T")

# query(offset) -> awaitable batch of items
Query = Callable[[int], Awaitable[Sequence[Any]]]
Listener = Callable[["PagedCollection[Any]", LoadingState], None]


class PagedCollection(Sequence[T]):
    """
    A sequence that fills itself page by page from a query function.

    The query is called with the current length of the collection and must
    return an awaitable resolving to the next batch of items. Loads are
    single-flight: concurrent calls to load_more() share one task.

    Usage:
        users = PagedCollection(lambda offset: api.find_users(offset))
        await users.pending_load
        await users.load_more()

    Subclasses may declare their settings in an inner Meta class:

        class Users(PagedCollection[User]):
            class Meta:
                item_type = User
                discard_stale = False
    """

    def __init__(
        self,
        query: Query,
        auto_start: bool | None = None,
        *,
        item_type: Any | None = None,
        discard_stale: bool | None = None,
    ) -> None:
        if not callable(query):
            raise TypeError(f"query must be callable, got {type(query).__name__}")

        self._options = CollectionOptions.from_meta(getattr(type(self), "Meta", None)).merged(
            auto_start=auto_start, item_type=item_type, discard_stale=discard_stale
        )
        self._query = query

        # Internal state, only mutated through load_more() / refresh()
        self._items: list[T] = []
        self._state = LoadingState.IDLE
        self._pending: asyncio.Task[Any] | None = None
        self._generation = 0
        self._listeners: list[Listener] = []
        self._notifications = 0

        self._adapter: TypeAdapter[list[Any]] | None = None
        if self._options.item_type is not None:
            self._adapter = TypeAdapter(list[self._options.item_type])  # type: ignore[valid-type]

        if self._options.auto_start:
            self.refresh()

    # --- SEQUENCE INTERFACE ---

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index: int | slice) -> T | list[T]:
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __contains__(self, value: object) -> bool:
        return value in self._items

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} len={len(self._items)} "
            f"state={self._state.value} generation={self._generation}>"
        )

    # --- ACCESSORS ---

    @property
    def query(self) -> Query:
        return self._query

    @property
    def options(self) -> CollectionOptions:
        return self._options

    @property
    def items(self) -> list[T]:
        """A copy of the loaded items."""
        return list(self._items)

    @property
    def loading_state(self) -> LoadingState:
        return self._state

    @property
    def pending_load(self) -> "asyncio.Task[LoadResult[T] | BaseException] | None":
        """The in-flight load task, or None."""
        return self._pending

    @property
    def is_loading(self) -> bool:
        return self._pending is not None

    @property
    def is_loaded(self) -> bool:
        return self._state is LoadingState.LOADED

    @property
    def has_failed(self) -> bool:
        return self._state is LoadingState.FAILED

    @property
    def generation(self) -> int:
        """Number of times refresh() has been called."""
        return self._generation

    # --- OBSERVATION ---

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        """
        Registers a callback invoked as callback(collection, state) whenever
        a load starts, settles, or the collection is refreshed.

        Returns:
            A function that removes the callback again.
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _set_state(self, state: LoadingState) -> None:
        self._state = state
        self._notifications += 1
        notification = self._notifications

        for listener in list(self._listeners):
            # A listener started a new load; its own notification already reached everyone
            if self._notifications != notification:
                break
            try:
                listener(self, self._state)
            except Exception:
                logger.exception(
                    "Listener failed",
                    extra={
                        "operation": "notify",
                        "state": self._state.value,
                        "generation": self._generation,
                    },
                )

    # --- LOADING ---

    def load_more(self) -> "asyncio.Task[LoadResult[T] | BaseException]":
        """
        Loads the next batch of items by calling the query with len(self).

        If a load is already in flight, the same task is returned and no new
        query is issued. The task never raises for a failed query: it resolves
        with the error instead, and loading_state becomes FAILED.

        Returns:
            A task resolving to a LoadResult, or to the error of a failed attempt.

        Raises:
            NoRunningLoopError: If a new load is needed and no event loop is running
        """
        if self._pending is not None:
            logger.debug(
                "Joining in-flight load",
                extra={"operation": "load_more", "generation": self._generation},
            )
            return self._pending

        return self._start_load(self._running_loop())

    def refresh(self) -> "asyncio.Task[LoadResult[T] | BaseException]":
        """
        Clears the collection and starts loading again from offset 0.

        The reset happens before this method returns. A load that was already
        in flight is not cancelled; unless discard_stale is disabled, its
        outcome is dropped when it settles.

        Raises:
            NoRunningLoopError: If no event loop is running
        """
        loop = self._running_loop()

        self._items.clear()
        self._generation += 1
        self._state = LoadingState.LOADING

        logger.info(
            "Refreshing collection",
            extra={
                "operation": "refresh",
                "generation": self._generation,
                "superseded_load": self._pending is not None,
            },
        )

        return self._start_load(loop)

    def _running_loop(self) -> asyncio.AbstractEventLoop:
        try:
            return asyncio.get_running_loop()
        except RuntimeError as e:
            raise NoRunningLoopError(original_error=e) from e

    def _start_load(
        self, loop: asyncio.AbstractEventLoop
    ) -> "asyncio.Task[LoadResult[T] | BaseException]":
        # Snapshot before the attempt, the offset and the first-success check depend on it
        offset = len(self._items)
        state_before = self._state
        generation = self._generation

        logger.info(
            "Starting load",
            extra={"operation": "load_more", "offset": offset, "generation": generation},
        )

        # The query is called before this method returns, errors surface from the task
        try:
            response: Any = self._query(offset)
        except Exception as error:
            response = _reraise(error)

        task = loop.create_task(self._load(response, offset, state_before, generation))
        self._pending = task
        self._set_state(LoadingState.LOADING)
        return task

    async def _load(
        self, response: Any, offset: int, state_before: LoadingState, generation: int
    ) -> "LoadResult[T] | BaseException":
        task = asyncio.current_task()

        try:
            try:
                batch = await self._fetch(response)
            finally:
                self._release(task)
        except asyncio.CancelledError:
            if not self._is_stale(generation):
                self._set_state(LoadingState.FAILED)
            raise
        except Exception as error:
            if self._is_stale(generation):
                return self._discard(generation, offset)

            logger.warning(
                "Load failed",
                extra={
                    "operation": "load_more",
                    "offset": offset,
                    "generation": generation,
                    "error": summarize_error(error),
                },
            )
            self._set_state(LoadingState.FAILED)
            return error

        if self._is_stale(generation):
            return self._discard(generation, offset)

        self._items.extend(batch)
        new_length = len(self._items)
        result = LoadResult(
            items=batch,
            old_length=offset,
            new_length=new_length,
            first_successful_query=state_before is LoadingState.LOADING and new_length > 0,
        )

        logger.info(
            "Load successful",
            extra={
                "operation": "load_more",
                "offset": offset,
                "generation": generation,
                "count": len(batch),
                "new_length": new_length,
            },
        )
        self._set_state(LoadingState.LOADED)
        return result

    async def _fetch(self, response: Any) -> list[T]:
        """Awaits the query's response and checks that it honoured the query contract."""
        if not inspect.isawaitable(response):
            raise QueryContractError(
                f"Query returned {type(response).__name__}, expected an awaitable",
                value=response,
            )

        batch = await response
        if isinstance(batch, (str, bytes, bytearray, Mapping)) or not isinstance(batch, Iterable):
            raise QueryContractError(
                f"Query resolved to {type(batch).__name__}, expected a sequence of items",
                value=batch,
            )

        items = list(batch)
        if self._adapter is None:
            return items

        with translate_validation_errors(item_type=self._options.item_type):
            return self._adapter.validate_python(items)

    def _is_stale(self, generation: int) -> bool:
        return self._options.discard_stale and generation != self._generation

    def _release(self, task: "asyncio.Task[Any] | None") -> None:
        # Legacy mode clears the slot even if a newer refresh() took it over
        if self._pending is task or not self._options.discard_stale:
            self._pending = None

    def _discard(self, generation: int, offset: int) -> StaleLoadError:
        logger.debug(
            "Discarding stale load",
            extra={
                "operation": "load_more",
                "offset": offset,
                "generation": generation,
                "current_generation": self._generation,
            },
        )
        return StaleLoadError(generation=generation, current_generation=self._generation)


async def _reraise(error: Exception) -> Any:
    raise error
