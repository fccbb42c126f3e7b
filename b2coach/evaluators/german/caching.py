"""Bounded TTL cache for remote evaluation payloads."""

import copy
import hashlib
import time
from threading import Lock
from typing import Any, Callable, Dict, Optional, Tuple


class ResponseCache:
    """Thread-safe cache with a size cap (oldest evicted first) and per-entry TTL."""

    def __init__(self, max_size: int = 100, ttl: float = 300.0,
                 clock: Callable[[], float] = time.monotonic):
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self._entries: Dict[Tuple, Tuple[float, Dict[str, Any]]] = {}
        self._max_size = max_size
        self._ttl = ttl
        self._clock = clock
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def add(self, key: Tuple, payload: Dict[str, Any]) -> None:
        """Store a payload, evicting the oldest entry when full."""
        with self._lock:
            self._entries.pop(key, None)
            if len(self._entries) >= self._max_size:
                oldest = next(iter(self._entries))
                self._entries.pop(oldest)
            self._entries[key] = (self._clock(), copy.deepcopy(payload))

    def get(self, key: Tuple) -> Optional[Dict[str, Any]]:
        """Return a deep copy of the cached payload, or None if missing/expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, payload = entry
            if self._clock() - stored_at >= self._ttl:
                self._entries.pop(key, None)
                return None
            return copy.deepcopy(payload)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    @staticmethod
    def make_key(text: str, mode: str, pressure_mode: bool) -> Tuple:
        digest = hashlib.sha256(text.encode("utf-8")).hexdigest()
        return (mode, pressure_mode, digest)
