"""Cache for values fetched by full refreshes and reused by quick ones."""

from __future__ import annotations

import logging
from typing import TypeVar

from sbb_departures.domain.contracts.board_cache import BoardCacheProtocol

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BoundedBoardCache(BoardCacheProtocol[T]):
    """Holds one value and serves it to at most ``max_uses`` quick refreshes.

    With ``max_uses`` set to None the value is served until replaced or cleared.
    """

    def __init__(self, name: str, max_uses: int | None = None) -> None:
        """Initialize the cache.

        Args:
            name: Label used in log messages.
            max_uses: How many reads a stored value may serve.
        """
        self.name = name
        self.max_uses = max_uses
        self._value: T | None = None
        self._uses = 0

    @property
    def exhausted(self) -> bool:
        """True when a value is stored but may no longer be served."""
        return (
            self._value is not None and self.max_uses is not None and self._uses >= self.max_uses
        )

    def get(self) -> T | None:
        if self._value is None or self.exhausted:
            return None
        self._uses += 1
        logger.debug(f"{self.name} cache hit ({self._uses}/{self.max_uses or 'unbounded'})")
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        self._uses = 0

    def clear(self) -> None:
        self._value = None
        self._uses = 0
