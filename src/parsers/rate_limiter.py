import asyncio


class RateLimiter:
    """Minimum-interval limiter for async HTTP clients.

    Callers ``await acquire()`` before each request; concurrent callers are
    serialized so requests leave at most ``max_rps`` per second.
    """

    def __init__(self, max_rps: float) -> None:
        if max_rps <= 0:
            raise ValueError(f"max_rps must be positive, got {max_rps}")
        self._min_interval = 1.0 / max_rps
        self._last_request: float | None = None
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        async with self._lock:
            loop = asyncio.get_running_loop()
            if self._last_request is not None:
                wait = self._min_interval - (loop.time() - self._last_request)
                if wait > 0:
                    await asyncio.sleep(wait)
            self._last_request = loop.time()
