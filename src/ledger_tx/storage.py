"""
Key-value storage boundary for serialized transactions.

The store holds opaque bytes; transactions cross it only through
``Transaction.serialize()`` and ``Transaction(bytes)``.
"""

from __future__ import annotations
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict

from .runtime.errors import NotFoundError
from .transaction import Transaction

logger = logging.getLogger(__name__)


class TransactionStore(ABC):
    """
    Abstract key-value store.

    Backends (LevelDB, files, remote services) implement ``get`` and ``put``.
    """

    @abstractmethod
    def get(self, key: bytes) -> bytes:
        """
        Fetch a value.

        Raises:
            NotFoundError: If the key is absent
        """
        pass

    @abstractmethod
    def put(self, key: bytes, value: bytes) -> bool:
        """Store a value, returning True on success."""
        pass

    def __contains__(self, key: bytes) -> bool:
        try:
            self.get(key)
        except NotFoundError:
            return False
        return True


class InMemoryTransactionStore(TransactionStore):
    """Dict-backed store, safe to share between threads."""

    def __init__(self):
        self._entries: Dict[bytes, bytes] = {}
        self._lock = threading.Lock()

    def get(self, key: bytes) -> bytes:
        with self._lock:
            try:
                return self._entries[bytes(key)]
            except KeyError:
                raise NotFoundError(details={"key": bytes(key).hex()}) from None

    def put(self, key: bytes, value: bytes) -> bool:
        with self._lock:
            self._entries[bytes(key)] = bytes(value)
        logger.debug(f"Stored {len(value)} bytes under {bytes(key).hex()[:16]}")
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def save_transaction(store: TransactionStore, tx: Transaction) -> bytes:
    """
    Store a transaction under its full hash.

    Returns:
        The key used
    """
    key = tx.hash()
    store.put(key, tx.serialize())
    return key


def load_transaction(store: TransactionStore, key: bytes, **kwargs: Any) -> Transaction:
    """
    Load and decode a stored transaction.

    Raises:
        NotFoundError: If the key is absent
        MalformedEncoding: If the stored bytes do not decode
    """
    return Transaction.from_bytes(store.get(key), **kwargs)


__all__ = [
    "InMemoryTransactionStore",
    "TransactionStore",
    "load_transaction",
    "save_transaction",
]
