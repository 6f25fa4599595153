"""Cache module for flushkv."""

from .flush import FlushCoordinator
from .store import Iterate, KeyValueStore, KeyValueStoreBase

__all__ = ["FlushCoordinator", "Iterate", "KeyValueStore", "KeyValueStoreBase"]
