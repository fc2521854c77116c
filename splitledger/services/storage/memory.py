"""
In-Memory Storage Implementation

Dict-backed implementation of the storage interfaces. Used in tests, and
as the default backend when nothing durable is configured.

Records are copied on the way in and out so callers can't mutate what is
"stored" behind the store's back.
"""

from typing import Optional
from uuid import UUID

from splitledger.models.audit import AuditEvent
from splitledger.models.ledger import (
    Expense,
    Group,
    LedgerSnapshot,
    Person,
)
from splitledger.services.storage.interface import (
    AuditStorageInterface,
    LedgerStorageInterface,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """
    Upsert-by-id storage held in dicts.

    Insertion order is kept; re-saving an existing id replaces the record in
    place. Expenses are returned newest-first, matching the store.
    """

    def __init__(self, snapshot: Optional[LedgerSnapshot] = None):
        self._people: dict[str, Person] = {}
        self._groups: dict[str, Group] = {}
        self._expenses: dict[str, Expense] = {}

        if snapshot:
            for person in snapshot.people:
                self._people[person.id] = person.model_copy()
            for group in snapshot.groups:
                self._groups[group.id] = group.model_copy(deep=True)
            # snapshot is newest-first, we store oldest-first
            for expense in reversed(snapshot.expenses):
                self._expenses[expense.id] = expense

    async def load_state(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            people=[p.model_copy() for p in self._people.values()],
            groups=[g.model_copy(deep=True) for g in self._groups.values()],
            expenses=list(reversed(self._expenses.values())),
        )

    async def save_person(self, person: Person) -> bool:
        self._people[person.id] = person.model_copy()
        return True

    async def delete_person(self, person_id: str) -> bool:
        return self._people.pop(person_id, None) is not None

    async def save_group(self, group: Group) -> bool:
        self._groups[group.id] = group.model_copy(deep=True)
        return True

    async def delete_group(self, group_id: str) -> bool:
        return self._groups.pop(group_id, None) is not None

    async def save_expense(self, expense: Expense) -> bool:
        self._expenses[expense.id] = expense
        return True

    async def delete_expense(self, expense_id: str) -> bool:
        return self._expenses.pop(expense_id, None) is not None

    @property
    def counts(self) -> dict[str, int]:
        return {
            "people": len(self._people),
            "groups": len(self._groups),
            "expenses": len(self._expenses),
        }


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log kept in a list."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        events = [
            e for e in self._events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        # list order is append order, which breaks timestamp ties correctly
        return list(reversed(self._events))[:limit]
