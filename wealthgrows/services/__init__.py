"""Services package."""

from wealthgrows.services.storage import (
    AuditStorageInterface,
    DuplicateError,
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    JsonLinesAuditStorage,
    LedgerStorageInterface,
    SnapshotLedgerStorage,
    StorageError,
    StoreCorrupt,
    StoreUnavailable,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "DuplicateError",
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
    "JsonLinesAuditStorage",
    "LedgerStorageInterface",
    "SnapshotLedgerStorage",
    "StorageError",
    "StoreCorrupt",
    "StoreUnavailable",
]
