"""In-memory sliding-window rate limiter keyed by client."""
from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass, field
from threading import Lock
from typing import Callable, Deque, Dict, NamedTuple, Optional


class Decision(NamedTuple):
    """Outcome of an admission check."""

    admitted: bool
    retry_after: float


@dataclass
class _Shard:
    lock: Lock = field(default_factory=Lock)
    windows: Dict[str, Deque[float]] = field(default_factory=dict)


class SlidingWindowRateLimiter:
    """Admits at most ``limit`` requests per key within a trailing window.

    Exact admission timestamps are kept per key. Keys are spread across
    independently locked shards so that a check for one key never waits on
    another shard's key.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        shards: int = 16,
        sweep_interval_seconds: Optional[float] = None,
    ) -> None:
        if limit < 0:
            raise ValueError("limit must not be negative")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        if sweep_interval_seconds is not None and sweep_interval_seconds < 0:
            raise ValueError("sweep_interval_seconds must not be negative")
        if shards < 1:
            raise ValueError("shards must be at least 1")
        self.limit = limit
        self.window = window_seconds
        self._clock = clock
        self._shards = [_Shard() for _ in range(shards)]
        self._sweep_interval = sweep_interval_seconds or None
        self._sweep_lock = Lock()
        self._last_sweep: Optional[float] = None

    def _shard_for(self, key: str) -> _Shard:
        return self._shards[hash(key) % len(self._shards)]

    def allow(self, key: str, now: Optional[float] = None) -> Decision:
        if now is None:
            now = self._clock()
        if self._sweep_interval is not None:
            self._maybe_sweep(now)

        cutoff = now - self.window
        shard = self._shard_for(key)
        with shard.lock:
            q = shard.windows.setdefault(key, deque())
            while q and q[0] < cutoff:
                q.popleft()
            if len(q) >= self.limit:
                if not q:
                    return Decision(False, self.window)
                retry = self.window - (now - q[0])
                return Decision(False, max(retry, 0.0))
            q.append(now)
            return Decision(True, 0.0)

    def sweep(self, now: Optional[float] = None) -> int:
        """Drop keys whose newest admission has left the window.

        Returns the number of keys removed.
        """

        if now is None:
            now = self._clock()
        cutoff = now - self.window
        removed = 0
        for shard in self._shards:
            with shard.lock:
                stale = [key for key, q in shard.windows.items() if not q or q[-1] < cutoff]
                for key in stale:
                    del shard.windows[key]
                removed += len(stale)
        return removed

    def _maybe_sweep(self, now: float) -> None:
        with self._sweep_lock:
            if self._last_sweep is None:
                self._last_sweep = now
                return
            if now - self._last_sweep < self._sweep_interval:
                return
            self._last_sweep = now
        self.sweep(now)

    def tracked_keys(self) -> int:
        """Return how many keys currently hold a window in memory."""

        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.windows)
        return total
