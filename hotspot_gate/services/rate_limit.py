from __future__ import annotations

import threading
import time
from collections import OrderedDict, deque
from typing import Callable, Protocol


class RateLimitStore(Protocol):
    def record(self, key: str) -> int:
        """Record one hit for ``key`` and return the hits inside the window."""
        ...


class SlidingWindowRateLimiter:
    """In-memory sliding-window counter, LRU-bounded by key count.

    Best effort: state is per process and lost on restart. Each key keeps at
    most ``max_history`` timestamps, and the least recently seen key is evicted
    once ``max_keys`` is exceeded. Every ``prune_every`` records, keys whose
    hits have all left the window are dropped.
    """

    def __init__(
        self,
        window_seconds: float = 60.0,
        max_keys: int = 100,
        max_history: int = 64,
        prune_every: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._window = window_seconds
        self._max_keys = max_keys
        self._max_history = max_history
        self._prune_every = max(1, prune_every)
        self._clock = clock
        self._hits: OrderedDict[str, deque[float]] = OrderedDict()
        self._records = 0
        self._lock = threading.Lock()

    def record(self, key: str) -> int:
        now = self._clock()
        with self._lock:
            self._records += 1
            if self._records >= self._prune_every:
                self._records = 0
                self._prune_all(now)
            hits = self._hits.get(key)
            if hits is None:
                hits = deque(maxlen=self._max_history)
                self._hits[key] = hits
            else:
                self._hits.move_to_end(key)
            self._prune(hits, now)
            hits.append(now)
            while len(self._hits) > self._max_keys:
                self._hits.popitem(last=False)
            return len(hits)

    def prune(self) -> None:
        """Drop every timestamp older than the window and any emptied keys."""
        now = self._clock()
        with self._lock:
            self._prune_all(now)

    def __len__(self) -> int:
        return len(self._hits)

    def __contains__(self, key: object) -> bool:
        return key in self._hits

    def _prune_all(self, now: float) -> None:
        for key in list(self._hits):
            hits = self._hits[key]
            self._prune(hits, now)
            if not hits:
                del self._hits[key]

    def _prune(self, hits: deque[float], now: float) -> None:
        while hits and now - hits[0] >= self._window:
            hits.popleft()
