"""
Pricing Table Cache - TTL cache for active pricing tables.

Owned and invalidated by whoever holds it (the pricing service); there is
no module-level cache. Every invalidation bumps a generation counter, so a
load that was already running when its variant was invalidated is returned
to its caller but never stored.
"""
import threading
import time
from typing import Callable, Optional

from ..engine.models import PricingTable


def _copy(table: PricingTable) -> PricingTable:
    return PricingTable.from_dict(table.to_dict())


class PricingTableCache:
    """Caches active pricing tables per variant for ttl_seconds."""

    def __init__(self, ttl_seconds: float = 60.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[float, PricingTable]] = {}
        self._generations: dict[str, int] = {}
        self._clears = 0

    def _generation(self, variant: str) -> tuple[int, int]:
        return self._clears, self._generations.get(variant, 0)

    def get(self, variant: str, loader: Callable[[str], PricingTable]) -> PricingTable:
        """Return a copy of the cached table for variant, calling loader when missing or stale."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(variant)
            if entry and now - entry[0] < self.ttl_seconds:
                return _copy(entry[1])
            generation = self._generation(variant)

        # Loader errors propagate and nothing is cached
        table = loader(variant)
        with self._lock:
            if self._generation(variant) == generation:
                self._entries[variant] = (now, _copy(table))
        return table

    def invalidate(self, variant: Optional[str] = None):
        """Drop one variant, or every variant when none is given."""
        with self._lock:
            if variant is None:
                self._entries.clear()
                self._clears += 1
            else:
                self._entries.pop(variant, None)
                self._generations[variant] = self._generations.get(variant, 0) + 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
