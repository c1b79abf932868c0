"""Locked: one exclusive lock around a TransactionalStore."""

import threading
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from typing import Any

from .transaction import NOT_FOUND, Transaction
from .transactional import TransactionalStore


class Locked(MutableMapping[str, Any]):
    """Serializes every call on a ``TransactionalStore``.

    A single re-entrant lock is held for the duration of each public
    call. ``transaction()`` holds it for the whole ``with`` block, so
    the block has the store to itself. Scopes opened with
    ``start_transaction()`` are still shared by every thread: the lock
    keeps the chain consistent, not the threads isolated.

    Implements ``MutableMapping[str, Any]`` and the ``Store`` protocol.
    """

    def __init__(self, store: TransactionalStore | None = None) -> None:
        self._store = store if store is not None else TransactionalStore()
        self._lock = threading.RLock()

    @property
    def store(self) -> TransactionalStore:
        """The wrapped store."""
        return self._store

    # -- Transactions --

    def start_transaction(self) -> Transaction:
        with self._lock:
            return self._store.start_transaction()

    begin = start_transaction

    def commit(self) -> bool:
        with self._lock:
            return self._store.commit()

    def rollback(self) -> bool:
        with self._lock:
            return self._store.rollback()

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        with self._lock:
            with self._store.transaction() as scope:
                yield scope

    @property
    def in_transaction(self) -> bool:
        with self._lock:
            return self._store.in_transaction

    @property
    def depth(self) -> int:
        with self._lock:
            return self._store.depth

    # -- Read operations --

    def get(self, key: str, default: Any = NOT_FOUND) -> Any:
        with self._lock:
            return self._store.get(key, default)

    def get_many(self, *keys: str) -> dict[str, Any]:
        with self._lock:
            return self._store.get_many(*keys)

    def keys(self) -> set[str]:  # type: ignore[override]
        with self._lock:
            return self._store.keys()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store

    def __getitem__(self, key: str) -> Any:
        with self._lock:
            return self._store[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    # -- Write operations --

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._store.set(key, value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.delete(key)

    remove = delete

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        with self._lock:
            del self._store[key]
