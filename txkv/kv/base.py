"""Abstract KV store interface."""

from abc import ABC, abstractmethod
from typing import Any, Iterable


class KVStore(ABC):
    """Base mapping underneath the transaction layer.

    Values are opaque: stored and returned as given, with no encoding.
    Only the outermost commit and writes made outside any transaction
    reach a ``KVStore``.
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Get the value for key, or ``default`` if not found."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Set value for key."""

    @abstractmethod
    def set_many(self, **kwargs: Any) -> None:
        """Set multiple key-value pairs."""

    @abstractmethod
    def keys(self) -> Iterable[str]:
        """Iterate over all keys."""

    @abstractmethod
    def __contains__(self, key: str) -> bool:
        """Check if key exists in store."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove a key if present."""

    @abstractmethod
    def remove_many(self, *keys: str) -> None:
        """Remove multiple keys."""
