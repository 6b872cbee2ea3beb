from __future__ import annotations

import math
import threading
import time
from typing import Callable, Dict, Tuple

from fastapi import Request

from userhub.core.errors import RateLimited


class RateLimiter:
    """Fixed-window request counter keyed by caller, safe to share across threads."""

    def __init__(self, limit: int, window_seconds: int, clock: Callable[[], float] = time.monotonic) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()
        self._next_prune = 0.0

    def hit(self, key: str) -> None:
        now = self._clock()
        with self._lock:
            if now >= self._next_prune:
                self._prune(now)
            count, reset = self._hits.get(key, (0, now + self.window_seconds))
            if now >= reset:
                count = 0
                reset = now + self.window_seconds
            count += 1
            self._hits[key] = (count, reset)
        if count > self.limit:
            raise RateLimited(retry_after=max(1, math.ceil(reset - now)))

    def _prune(self, now: float) -> None:
        # caller holds the lock
        expired = [key for key, (_, reset) in self._hits.items() if now >= reset]
        for key in expired:
            del self._hits[key]
        self._next_prune = now + self.window_seconds


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"
