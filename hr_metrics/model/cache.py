import dataclasses
import time
import typing

DEFAULT_TTL = 5 * 60


@dataclasses.dataclass
class CacheStats:
    total_items: int
    expired_items: int
    active_items: int

    @property
    def hit_rate(self) -> float:
        return self.active_items / self.total_items if self.total_items else 0.0


class DataCache:

    def __init__(self, ttl: float = DEFAULT_TTL, clock: typing.Callable[[], float] = time.monotonic):
        self._ttl = ttl
        self._clock = clock
        self._items = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    def set(self, key, value, ttl: float = None):
        self._items[key] = (value, self._clock(), ttl or self._ttl)

    def get(self, key, default=None):
        if key not in self._items:
            return default
        value, timestamp, ttl = self._items[key]
        if self._clock() - timestamp > ttl:
            del self._items[key]
            return default
        return value

    def has(self, key) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def __contains__(self, key):
        return self.has(key)

    def delete(self, key):
        self._items.pop(key, None)

    def clear(self):
        self._items.clear()

    def stats(self) -> CacheStats:
        now = self._clock()
        expired = sum(1 for _, timestamp, ttl in self._items.values() if now - timestamp > ttl)
        return CacheStats(len(self._items), expired, len(self._items) - expired)


_MISSING = object()
