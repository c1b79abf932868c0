"""In-memory KV store."""

import threading
from typing import Any, Iterable, Mapping

from .base import KVStore


class Memory(KVStore):
    """A memory-backed KV store.

    Every operation takes a single lock, so the backend itself stays
    consistent even when the transaction layer above it is shared.
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self.memory: dict[str, Any] = dict(initial) if initial else {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self.memory.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self.memory[key] = value

    def set_many(self, **kwargs: Any) -> None:
        with self._lock:
            self.memory.update(kwargs)

    def keys(self) -> Iterable[str]:
        with self._lock:
            return list(self.memory.keys())

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self.memory

    def remove(self, key: str) -> None:
        with self._lock:
            self.memory.pop(key, None)

    def remove_many(self, *keys: str) -> None:
        with self._lock:
            for key in keys:
                self.memory.pop(key, None)
