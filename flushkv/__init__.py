"""
flushkv: Persistent In-Memory Key-Value Store

A small string-keyed cache that serializes itself to a byte sink using
a length-prefixed encoding, and re-synchronizes with that sink on a timer.
"""

from .cache.store import Iterate, KeyValueStore, KeyValueStoreBase
from .protocol.results import ABSENT, Absent, Present

__version__ = "1.0.0"

__all__ = [
    "ABSENT",
    "Absent",
    "Iterate",
    "KeyValueStore",
    "KeyValueStoreBase",
    "Present",
]
