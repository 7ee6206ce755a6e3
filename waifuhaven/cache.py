from __future__ import annotations
import time
from typing import Callable, Optional

from .models import CategorySet

CATEGORY_CACHE_TTL = 5 * 60


class CategoryCache:
    """In-memory holder for the last fetched CategorySet.

    Owned by a single client. No locking: concurrent refetches after expiry
    simply overwrite each other.
    """

    def __init__(self, ttl_seconds: float = CATEGORY_CACHE_TTL, clock: Optional[Callable[[], float]] = None):
        self.ttl_seconds = ttl_seconds
        self.clock = clock or time.monotonic
        self._value: Optional[CategorySet] = None

    def load(self) -> Optional[CategorySet]:
        value = self._value
        if value is None:
            return None
        if value.is_stale(self.clock(), self.ttl_seconds):
            self._value = None
            return None
        return value

    def save(self, categories: CategorySet) -> None:
        self._value = categories

    def invalidate(self) -> None:
        self._value = None

    def now(self) -> float:
        return self.clock()
