"""
Result Store - cache of previous optimization results.
"""
import threading
import time
from typing import Any, Callable, Optional, Protocol


class ResultStore(Protocol):
    """Key/value cache with per-entry expiry."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def put(self, key: str, value: Any, ttl_seconds: float):
        ...


class InMemoryResultStore:
    """
    Process-local ResultStore.

    Expired entries are dropped on read and swept on every write. Once
    `max_entries` is reached the oldest write is evicted first.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, max_entries: int = 256):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._clock = clock
        self._max_entries = max_entries
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def put(self, key: str, value: Any, ttl_seconds: float):
        with self._lock:
            now = self._clock()
            self._purge_expired(now)
            # re-insert so dict order stays oldest write first
            self._entries.pop(key, None)
            while len(self._entries) >= self._max_entries:
                del self._entries[next(iter(self._entries))]
            self._entries[key] = (now + ttl_seconds, value)

    def _purge_expired(self, now: float):
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
