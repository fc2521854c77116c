"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for persistence.
This allows us to:
1. Keep the ledger core free of any storage code
2. Use in-memory storage for tests and single-session use
3. Plug in a real backend later without touching business logic

CONTRACT: Every save is an upsert keyed by the record's application-level
`id`. Saving the same id twice with the same payload must leave exactly
one record. Records are always sent whole, never as diffs. There are no
multi-record transactions.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from splitledger.models.audit import AuditEvent
from splitledger.models.ledger import (
    Expense,
    Group,
    LedgerSnapshot,
    Person,
)


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger persistence.

    Any backing store must implement these methods.
    """

    @abstractmethod
    async def load_state(self) -> LedgerSnapshot:
        """
        Load everything stored.

        Returns:
            Snapshot with people, groups and expenses (expenses newest-first)

        Raises:
            StorageError: If the store can't be read
        """
        pass

    @abstractmethod
    async def save_person(self, person: Person) -> bool:
        """
        Upsert a person by id.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete_person(self, person_id: str) -> bool:
        """
        Delete a person by id.

        Returns:
            True if a record was removed, False if none matched
        """
        pass

    @abstractmethod
    async def save_group(self, group: Group) -> bool:
        """Upsert a group by id."""
        pass

    @abstractmethod
    async def delete_group(self, group_id: str) -> bool:
        """Delete a group by id."""
        pass

    @abstractmethod
    async def save_expense(self, expense: Expense) -> bool:
        """Upsert an expense by id."""
        pass

    @abstractmethod
    async def delete_expense(self, expense_id: str) -> bool:
        """Delete an expense by id."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g. one person deletion).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific record.

        Args:
            entity_type: Type of record (e.g. 'person', 'expense')
            entity_id: The record's id

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageConnectionError(StorageError):
    """Could not reach the storage backend. Safe to retry."""
    pass
