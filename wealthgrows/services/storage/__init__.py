"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements local JSON files as the backend, but designed to be swappable.
"""

from wealthgrows.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    LedgerStorageInterface,
    StorageError,
    StoreCorrupt,
    StoreUnavailable,
)
from wealthgrows.services.storage.snapshot import (
    InMemoryLedgerStorage,
    SnapshotLedgerStorage,
)
from wealthgrows.services.storage.json_file import (
    JsonFileLedgerStorage,
    JsonLinesAuditStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerStorageInterface",
    # Exceptions
    "DuplicateError",
    "StorageError",
    "StoreCorrupt",
    "StoreUnavailable",
    # Implementations
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
    "JsonLinesAuditStorage",
    "SnapshotLedgerStorage",
]
