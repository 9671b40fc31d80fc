"""Protocol for caches filled by full refreshes."""

from typing import Protocol, TypeVar

T = TypeVar("T")


class BoardCacheProtocol(Protocol[T]):
    """A single cached value that may serve a bounded number of quick refreshes."""

    def get(self) -> T | None:
        """Return the cached value if it may still be served, counting the use."""
        ...

    def set(self, value: T) -> None:
        """Store a value from a full refresh and reset the use counter."""
        ...

    def clear(self) -> None:
        """Drop the cached value."""
        ...
