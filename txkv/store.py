"""Store protocol and factory function."""

from __future__ import annotations

import logging
from typing import (
    TYPE_CHECKING,
    Any,
    ContextManager,
    Iterable,
    Iterator,
    Mapping,
    Protocol,
    runtime_checkable,
)

from .kv.memory import Memory
from .locked import Locked
from .transactional import TransactionalStore

if TYPE_CHECKING:
    from .transaction import Transaction


@runtime_checkable
class Store(Protocol):
    """Protocol for key-value stores with nested transactions.

    Implements ``MutableMapping[str, Any]`` semantics.
    Implementations: ``TransactionalStore``, ``Locked``.
    """

    def get(self, key: str, default: Any = ...) -> Any: ...
    def get_many(self, *keys: str) -> dict[str, Any]: ...
    def keys(self) -> Iterable[str]: ...
    def __contains__(self, key: object) -> bool: ...
    def __getitem__(self, key: str) -> Any: ...
    def __setitem__(self, key: str, value: Any) -> None: ...
    def __delitem__(self, key: str) -> None: ...
    def __iter__(self) -> Iterator[str]: ...
    def __len__(self) -> int: ...
    def set(self, key: str, value: Any) -> None: ...
    def delete(self, key: str) -> None: ...
    def start_transaction(self) -> Transaction: ...
    def commit(self) -> bool: ...
    def rollback(self) -> bool: ...
    def transaction(self) -> ContextManager[Transaction]: ...


def store(
    *,
    initial: Mapping[str, Any] | None = None,
    locked: bool = False,
    logger: logging.Logger | None = None,
) -> Store:
    """Create a Store with sensible defaults.

    Args:
        initial: Committed contents to seed the backend with.
        locked: Wrap the store in ``Locked`` so it can be shared
            between threads.
        logger: Logger for diagnostic messages (default
            ``txkv.transactional``).

    Returns:
        A ``TransactionalStore``, or a ``Locked`` wrapping one.
    """
    if initial is not None:
        for key in initial:
            if not isinstance(key, str):
                raise TypeError(f"Keys must be str, got {type(key).__name__}")
    backend = Memory(initial)
    txstore = TransactionalStore(backend, logger=logger)
    if locked:
        return Locked(txstore)
    return txstore
