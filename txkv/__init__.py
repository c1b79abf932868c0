"""txkv: In-memory key-value store with nested transactions."""

from .kv.base import KVStore
from .kv.memory import Memory
from .locked import Locked
from .store import Store, store
from .transaction import NOT_FOUND, Transaction, TransactionState
from .transactional import TransactionalStore

__all__ = [
    "KVStore",
    "Locked",
    "Memory",
    "NOT_FOUND",
    "Store",
    "Transaction",
    "TransactionState",
    "TransactionalStore",
    "store",
]
