"""Bounded TTL cache for resolved token image URLs."""

import time
from collections import OrderedDict
from collections.abc import Callable


class ImageCache:
    """uri -> image URL, expiring after ``ttl_sec`` and capped at ``max_size``.

    Oldest entries are evicted first once full. Owned by whoever builds the
    resolver; nothing here is process-global.
    """

    def __init__(
        self,
        ttl_sec: float = 3600.0,
        max_size: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_sec
        self._max_size = max_size
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, str]] = OrderedDict()

    def get(self, uri: str) -> str | None:
        entry = self._entries.get(uri)
        if entry is None:
            return None
        stored_at, url = entry
        if self._clock() - stored_at > self._ttl:
            del self._entries[uri]
            return None
        return url

    def set(self, uri: str, url: str) -> None:
        self._entries.pop(uri, None)
        self._entries[uri] = (self._clock(), url)
        while len(self._entries) > self._max_size:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
