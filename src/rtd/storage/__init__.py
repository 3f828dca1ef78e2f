"""
RTD Storage Module

Read-only adapters over the key/value store the identity SDK writes to.
"""

from .signal_store import (
    InMemorySignalStore,
    ReadResult,
    RedisSignalStore,
    SignalStore,
    read_json,
)

__all__ = [
    "InMemorySignalStore",
    "ReadResult",
    "RedisSignalStore",
    "SignalStore",
    "read_json",
]
