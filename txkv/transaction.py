"""Transaction: one overlay scope in a nested transaction chain."""

from enum import Enum
from typing import Any, Iterator

from .kv.base import KVStore


class _NotFound:
    """Type of the ``NOT_FOUND`` sentinel."""

    _instance: "_NotFound | None" = None

    def __new__(cls) -> "_NotFound":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __reduce__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND: Any = _NotFound()
"""Returned by reads for keys that are absent or shadowed by a removal.

Distinct from ``None``, which is an ordinary storable value.
"""


class TransactionState(Enum):
    OPEN = "open"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class Transaction:
    """A scope of pending writes and removals over a parent scope.

    A key is never both written and removed in the same scope: a write
    discards a pending removal and a removal drops a pending write.

    Scopes are created and closed by ``TransactionalStore``; the object
    handed back to callers is for inspection. Closing is idempotent:
    once committed or rolled back, a scope never touches its parent or
    the backend again.
    """

    def __init__(self, parent: "Transaction | None" = None) -> None:
        self.parent = parent
        self.depth: int = parent.depth + 1 if parent is not None else 1
        self.state = TransactionState.OPEN
        self._updates: dict[str, Any] = {}
        self._removals: set[str] = set()

    def __repr__(self) -> str:
        return (
            f"Transaction(depth={self.depth}, state={self.state.value}, "
            f"updates={len(self._updates)}, removals={len(self._removals)})"
        )

    # -- Inspection --

    @property
    def is_open(self) -> bool:
        return self.state is TransactionState.OPEN

    @property
    def has_changes(self) -> bool:
        """Whether this scope holds pending writes or removals."""
        return bool(self._updates or self._removals)

    @property
    def updates(self) -> dict[str, Any]:
        """A copy of the pending writes in this scope."""
        return dict(self._updates)

    @property
    def removals(self) -> frozenset[str]:
        """The keys marked removed in this scope."""
        return frozenset(self._removals)

    def chain(self) -> Iterator["Transaction"]:
        """Yield this scope and its ancestors, innermost first."""
        scope: Transaction | None = self
        while scope is not None:
            yield scope
            scope = scope.parent

    # -- Reads --

    def resolve(self, key: str) -> tuple[bool, Any]:
        """Resolve ``key`` against this scope and its ancestors.

        Returns:
            ``(True, value)`` for the innermost pending write,
            ``(True, NOT_FOUND)`` when a pending removal is reached
            first, and ``(False, NOT_FOUND)`` when no scope on the
            chain touches the key and the backend decides.
        """
        for scope in self.chain():
            if key in scope._updates:
                return True, scope._updates[key]
            if key in scope._removals:
                return True, NOT_FOUND
        return False, NOT_FOUND

    def visible_keys(self, committed: set[str]) -> set[str]:
        """Apply every scope on the chain, outermost first, to ``committed``."""
        seen = set(committed)
        for scope in reversed(list(self.chain())):
            seen -= scope._removals
            seen.update(scope._updates)
        return seen

    # -- Writes --

    def _check_open(self) -> None:
        if not self.is_open:
            raise RuntimeError(f"Transaction is {self.state.value}")

    def set(self, key: str, value: Any) -> None:
        """Record a pending write, clearing any pending removal of ``key``."""
        self._check_open()
        self._removals.discard(key)
        self._updates[key] = value

    def remove(self, key: str) -> None:
        """Mark ``key`` removed, dropping any pending write of it."""
        self._check_open()
        self._updates.pop(key, None)
        self._removals.add(key)

    # -- Close --

    def commit(self, backend: KVStore) -> bool:
        """Fold this scope into its parent, or into ``backend`` at the root.

        Only one level is committed; ancestors stay open.

        Returns:
            False if the scope was already closed (nothing happens).
        """
        if not self.is_open:
            return False
        if self.parent is not None:
            for key, value in self._updates.items():
                self.parent.set(key, value)
            for key in self._removals:
                self.parent.remove(key)
        else:
            if self._updates:
                backend.set_many(**self._updates)
            if self._removals:
                backend.remove_many(*self._removals)
        self._close(TransactionState.COMMITTED)
        return True

    def rollback(self) -> bool:
        """Discard every pending change in this scope.

        Returns:
            False if the scope was already closed (nothing happens).
        """
        if not self.is_open:
            return False
        self._close(TransactionState.ROLLED_BACK)
        return True

    def _close(self, state: TransactionState) -> None:
        self._updates.clear()
        self._removals.clear()
        self.state = state
