"""Bounded memo of recent summary computations."""

from __future__ import annotations

from collections import OrderedDict
from typing import Generic, Hashable, Optional, TypeVar

from ..logging_config import get_logger

logger = get_logger(__name__)

V = TypeVar("V")


class SummaryCache(Generic[V]):
    """Keeps the last ``capacity`` results keyed by filter; oldest insertion evicted first.

    Cached values are expected to be immutable (frozen dataclasses holding
    tuples); an entry is only ever replaced whole, never updated in place.
    """

    def __init__(self, capacity: int = 10):
        if capacity < 1:
            raise ValueError("cache capacity must be at least 1")
        self.capacity = capacity
        self._entries: OrderedDict[Hashable, V] = OrderedDict()

    def get(self, key: Hashable) -> Optional[V]:
        value = self._entries.get(key)
        if value is not None:
            logger.debug("Summary cache hit", extra={"cache_key": key})
        return value

    def put(self, key: Hashable, value: V) -> V:
        # Replacing an existing key keeps its original insertion slot.
        self._entries[key] = value
        while len(self._entries) > self.capacity:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Summary cache eviction", extra={"cache_key": evicted})
        return value

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[Hashable]:
        return list(self._entries.keys())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["SummaryCache"]
