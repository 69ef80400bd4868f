"""
Whole-Collection Snapshot Storage

DESIGN DECISION: Each collection (transactions, categories) is one
serialized JSON document. Every mutation reads the full collection,
applies the change and writes the full collection back.

TRADEOFFS:
- Not suitable for high-volume data (we're fine for personal use)
- No partial writes or row-level locking
- Read-modify-write runs under one lock, so concurrent callers
  cannot overwrite each other's changes

Subclasses only provide two primitives: load a blob by key and store
a blob by key. Parsing, ordering, seeding and duplicate checks live here.
"""

import threading
from abc import abstractmethod
from typing import Callable, Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from wealthgrows.models.ledger import DEFAULT_CATEGORIES, Category, Transaction
from wealthgrows.services.storage.interface import (
    DuplicateError,
    LedgerStorageInterface,
    StoreCorrupt,
)


TRANSACTION_LIST = TypeAdapter(list[Transaction])
CATEGORY_LIST = TypeAdapter(list[Category])


def sort_newest_first(transactions: list[Transaction]) -> list[Transaction]:
    """Date descending; the sort is stable, so ties keep their current order."""
    return sorted(transactions, key=lambda t: t.date, reverse=True)


class SnapshotLedgerStorage(LedgerStorageInterface):
    """
    Ledger storage over two whole-collection blobs.

    Subclasses implement `_load_blob` / `_store_blob`; both must raise
    StoreUnavailable when the medium fails. `on_seed` is called with the
    number of categories written when the defaults are seeded.
    """

    def __init__(
        self,
        transactions_key: str = "wealthgrows_transactions",
        categories_key: str = "wealthgrows_categories",
        lock: Optional[threading.RLock] = None,
        on_seed: Optional[Callable[[int], None]] = None,
    ):
        self._transactions_key = transactions_key
        self._categories_key = categories_key
        self._lock = lock or threading.RLock()
        self._on_seed = on_seed
        self._logger = structlog.get_logger(__name__)

    @abstractmethod
    def _load_blob(self, key: str) -> Optional[str]:
        """Raw snapshot for `key`, or None if nothing was ever stored."""
        pass

    @abstractmethod
    def _store_blob(self, key: str, payload: str) -> None:
        """Replace the snapshot for `key` in one step."""
        pass

    # -------------------------------------------------------------------------
    # Snapshot (de)serialization
    # -------------------------------------------------------------------------

    def _read_transactions(self) -> list[Transaction]:
        blob = self._load_blob(self._transactions_key)
        if blob is None:
            return []
        try:
            return TRANSACTION_LIST.validate_json(blob)
        except ValidationError as e:
            raise StoreCorrupt(
                f"Transactions snapshot could not be parsed: {e.error_count()} errors",
                collection=self._transactions_key,
            ) from e

    def _write_transactions(self, transactions: list[Transaction]) -> None:
        payload = TRANSACTION_LIST.dump_json(transactions, indent=2).decode("utf-8")
        self._store_blob(self._transactions_key, payload)

    def _read_categories(self) -> list[Category]:
        """Categories, seeding the defaults when nothing is persisted yet."""
        blob = self._load_blob(self._categories_key)
        if blob is None:
            seeded = list(DEFAULT_CATEGORIES)
            self._write_categories(seeded)
            self._logger.info(
                "categories_seeded",
                collection=self._categories_key,
                count=len(seeded),
            )
            if self._on_seed:
                self._on_seed(len(seeded))
            return seeded
        try:
            return CATEGORY_LIST.validate_json(blob)
        except ValidationError as e:
            raise StoreCorrupt(
                f"Categories snapshot could not be parsed: {e.error_count()} errors",
                collection=self._categories_key,
            ) from e

    def _write_categories(self, categories: list[Category]) -> None:
        payload = CATEGORY_LIST.dump_json(categories, indent=2).decode("utf-8")
        self._store_blob(self._categories_key, payload)

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def list_transactions(self) -> list[Transaction]:
        with self._lock:
            return sort_newest_first(self._read_transactions())

    def save_transaction(self, transaction: Transaction) -> list[Transaction]:
        with self._lock:
            current = self._read_transactions()
            if any(t.id == transaction.id for t in current):
                raise DuplicateError(
                    f"Transaction already exists: {transaction.id}",
                    collection=self._transactions_key,
                )
            # New entry goes first so it wins ties on date
            updated = sort_newest_first([transaction, *current])
            self._write_transactions(updated)
            return updated

    def delete_transaction(self, transaction_id: str) -> list[Transaction]:
        with self._lock:
            current = self._read_transactions()
            updated = [t for t in current if t.id != transaction_id]
            if len(updated) != len(current):
                self._write_transactions(updated)
            return sort_newest_first(updated)

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def list_categories(self) -> list[Category]:
        with self._lock:
            return self._read_categories()

    def add_category(self, category: Category) -> list[Category]:
        with self._lock:
            current = self._read_categories()
            if any(c.id == category.id for c in current):
                raise DuplicateError(
                    f"Category already exists: {category.id}",
                    collection=self._categories_key,
                )
            updated = [*current, category]
            self._write_categories(updated)
            return updated

    def delete_category(self, category_id: str) -> list[Category]:
        with self._lock:
            current = self._read_categories()
            updated = [c for c in current if c.id != category_id]
            if len(updated) != len(current):
                self._write_categories(updated)
            return updated


class InMemoryLedgerStorage(SnapshotLedgerStorage):
    """
    Ledger storage kept in a dict of serialized blobs.

    Blobs are still JSON text, so tests exercise the same parsing and
    corruption handling as the file backend.
    """

    def __init__(
        self,
        blobs: Optional[dict[str, str]] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._blobs: dict[str, str] = dict(blobs or {})

    def _load_blob(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def _store_blob(self, key: str, payload: str) -> None:
        self._blobs[key] = payload

    @property
    def blobs(self) -> dict[str, str]:
        """Copy of the raw snapshots, keyed by collection name."""
        return dict(self._blobs)
