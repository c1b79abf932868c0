"""TransactionalStore: nested transactions over a KV store."""

import logging
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from typing import Any

from .kv.base import KVStore
from .kv.memory import Memory
from .transaction import NOT_FOUND, Transaction

log = logging.getLogger(__name__)


class TransactionalStore(MutableMapping[str, Any]):
    """Key-value store with nested commit/rollback scopes.

    Outside a transaction, ``set()`` / ``delete()`` go straight to the
    backend. ``start_transaction()`` pushes a new scope; writes and
    deletions are buffered there and reads walk the scope chain,
    innermost first, before falling back to the backend.

    ``commit()`` folds the innermost scope into its parent (or into the
    backend for the outermost scope). ``rollback()`` discards it. With
    no transaction open, both are logged no-ops.

    Implements ``MutableMapping[str, Any]`` and the ``Store`` protocol.
    Not thread-safe; wrap in ``Locked`` to share between threads.
    """

    def __init__(
        self,
        backend: KVStore | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._backend = backend if backend is not None else Memory()
        self._log = logger if logger is not None else log
        self._current: Transaction | None = None

    def _check_key(self, key: object) -> None:
        if not isinstance(key, str):
            raise TypeError(f"Keys must be str, got {type(key).__name__}")

    # -- Transactions --

    def start_transaction(self) -> Transaction:
        """Open a new scope nested in the current one."""
        self._current = Transaction(self._current)
        self._log.info("Transaction started")
        return self._current

    begin = start_transaction

    def commit(self) -> bool:
        """Commit the innermost scope one level outward.

        Returns:
            True if a transaction was committed, False if none was open.
        """
        scope = self._current
        if scope is None:
            self._log.info("Transaction has not been started")
            return False
        scope.commit(self._backend)
        self._current = scope.parent
        self._log.info("Transaction committed")
        return True

    def rollback(self) -> bool:
        """Discard the innermost scope.

        Returns:
            True if a transaction was rolled back, False if none was open.
        """
        scope = self._current
        if scope is None:
            self._log.info("Transaction has not been started")
            return False
        scope.rollback()
        self._current = scope.parent
        self._log.info("Transaction rolled back")
        return True

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """Run a block in its own scope.

        Commits on normal exit; rolls back and re-raises on error.
        Scopes the block opened and left open are rolled back first.
        """
        scope = self.start_transaction()
        try:
            yield scope
        except BaseException:
            self._unwind_to(scope)
            if scope.is_open:
                self.rollback()
            raise
        self._unwind_to(scope)
        if scope.is_open:
            self.commit()

    def _unwind_to(self, scope: Transaction) -> None:
        # An open scope is always on the active chain.
        while scope.is_open and self._current is not scope:
            self.rollback()

    @property
    def in_transaction(self) -> bool:
        return self._current is not None

    @property
    def depth(self) -> int:
        """Number of open scopes."""
        return self._current.depth if self._current is not None else 0

    @property
    def current(self) -> Transaction | None:
        """The innermost open scope, if any."""
        return self._current

    @property
    def backend(self) -> KVStore:
        return self._backend

    # -- Read operations --

    def _lookup(self, key: str) -> Any:
        if self._current is not None:
            resolved, value = self._current.resolve(key)
            if resolved:
                return value
        return self._backend.get(key, NOT_FOUND)

    def get(self, key: str, default: Any = NOT_FOUND) -> Any:
        """Get the value visible from the innermost scope.

        A pending deletion in any scope on the way out hides the key
        from every ancestor and from the backend.
        """
        self._check_key(key)
        value = self._lookup(key)
        if value is NOT_FOUND:
            self._log.debug("Value not found for key: %s", key)
            return default
        self._log.debug("Value retrieved for key: %s", key)
        return value

    def get_many(self, *keys: str) -> dict[str, Any]:
        """Get multiple values, skipping keys that are not visible."""
        result: dict[str, Any] = {}
        for key in keys:
            value = self.get(key)
            if value is not NOT_FOUND:
                result[key] = value
        return result

    def keys(self) -> set[str]:  # type: ignore[override]
        """All keys visible from the innermost scope."""
        committed = set(self._backend.keys())
        if self._current is None:
            return committed
        return self._current.visible_keys(committed)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        if self._current is not None:
            resolved, value = self._current.resolve(key)
            if resolved:
                return value is not NOT_FOUND
        return key in self._backend

    def __getitem__(self, key: str) -> Any:
        value = self.get(key)
        if value is NOT_FOUND:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        if key not in self:
            raise KeyError(key)
        self.delete(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.keys())

    # -- Write operations --

    def set(self, key: str, value: Any) -> None:
        """Write to the innermost scope, or the backend outside a transaction."""
        self._check_key(key)
        if self._current is not None:
            self._current.set(key, value)
        else:
            self._backend.set(key, value)
        self._log.debug("Key-value pair set: %s=%s", key, value)

    def delete(self, key: str) -> None:
        """Delete a key. Missing keys are ignored.

        Inside a transaction the deletion is pending until the
        outermost scope commits.
        """
        self._check_key(key)
        if self._current is not None:
            self._current.remove(key)
        else:
            self._backend.remove(key)
        self._log.debug("Key deleted: %s", key)

    remove = delete
