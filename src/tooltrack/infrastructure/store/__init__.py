"""Record store infrastructure.

Concrete implementations of the RecordStore protocol.
"""

from tooltrack.infrastructure.store.file import JsonFileRecordStore
from tooltrack.infrastructure.store.memory import InMemoryRecordStore

__all__ = [
    "InMemoryRecordStore",
    "JsonFileRecordStore",
]
