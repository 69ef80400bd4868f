"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the local JSON files for a real database later
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface is intentionally simple - we're not building a full ORM.
Every mutation returns the full, updated collection, because the UI
re-renders from whole collections anyway.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from wealthgrows.models.audit import AuditEvent
from wealthgrows.models.ledger import Category, Transaction


class LedgerStorageInterface(ABC):
    """
    Abstract interface for the ledger's two collections.

    Any storage implementation must implement these methods. Each
    mutation is a whole-collection read-modify-write and must be atomic
    with respect to other mutations on the same store.
    """

    @abstractmethod
    def list_transactions(self) -> list[Transaction]:
        """
        All transactions, newest first.

        Ties on date keep the most recently saved entry first.

        Raises:
            StoreUnavailable: If the medium cannot be read
            StoreCorrupt: If the persisted snapshot cannot be parsed
        """
        pass

    @abstractmethod
    def save_transaction(self, transaction: Transaction) -> list[Transaction]:
        """
        Insert a transaction and persist the whole collection.

        There is no update in place: to change an entry, delete it and
        save a new one.

        Returns:
            The updated collection, newest first

        Raises:
            DuplicateError: If a transaction with the same ID exists
            StoreUnavailable / StoreCorrupt: On storage failure
        """
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> list[Transaction]:
        """
        Remove a transaction by ID.

        Deleting an unknown ID is a no-op, not an error.

        Returns:
            The updated collection, newest first
        """
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """
        All categories in insertion order.

        On first access, with nothing persisted yet, the built-in
        defaults are written and returned.
        """
        pass

    @abstractmethod
    def add_category(self, category: Category) -> list[Category]:
        """
        Append a category.

        Raises:
            DuplicateError: If a category with the same ID exists
        """
        pass

    @abstractmethod
    def delete_category(self, category_id: str) -> list[Category]:
        """
        Remove a category by ID.

        Never cascades: transactions keep their snapshot fields.
        Deleting an unknown ID is a no-op.
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """All events for a correlation ID, in chronological order."""
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """The most recent audit events, newest first."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""

    def __init__(self, message: str, collection: Optional[str] = None):
        super().__init__(message)
        self.collection = collection


class StoreUnavailable(StorageError):
    """The storage medium cannot be read or written."""
    pass


class StoreCorrupt(StorageError):
    """
    A persisted snapshot exists but does not parse.

    CRITICAL: Never treat this as "no data". Overwriting a corrupt
    snapshot with an empty collection would destroy the user's records.
    """
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
