from enum import Enum


class LoadingState(str, Enum):
    """
    Loading status of a PagedCollection.

    Members compare equal to their string values, so UI bindings can test
    ``collection.loading_state == "loading"`` directly.
    """

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value
