"""
Ledger Store

The authoritative in-memory collections for the current session: the
roster, the groups, and the expenses. Nothing else mutates them.

DESIGN DECISION: The store is synchronous and knows nothing about
persistence. A mutation is visible to the very next read. Saving to a
backing store is the service layer's job and happens AFTER the in-memory
change; a failed save never rolls it back.

Invariants:
- The acting user is always in the roster and cannot be deleted
- Expenses are newest-first (add_expense prepends)
- Expenses are never edited in place, only added or removed
"""

from typing import Iterable, Optional

from splitledger.models.ledger import (
    Expense,
    ExpenseDraft,
    Group,
    LedgerSnapshot,
    Person,
    new_record_id,
)

UNKNOWN_PERSON_NAME = "Unknown"


class LedgerStore:
    """
    In-memory ledger for one session.

    Inject one instance into whatever consumes it (service, CLI, test);
    there is no global instance.
    """

    def __init__(
        self,
        acting_user_id: str = "1",
        acting_user_name: str = "You",
    ):
        self._acting_user_id = acting_user_id
        self._acting_user_name = acting_user_name
        self._people: list[Person] = [self._acting_user()]
        self._groups: list[Group] = []
        self._expenses: list[Expense] = []

    def _acting_user(self) -> Person:
        return Person(id=self._acting_user_id, name=self._acting_user_name)

    def _fresh_id(self, taken: Iterable[str]) -> str:
        taken = set(taken)
        record_id = new_record_id()
        while record_id in taken:
            record_id = new_record_id()
        return record_id

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def acting_user_id(self) -> str:
        return self._acting_user_id

    @property
    def people(self) -> tuple[Person, ...]:
        return tuple(self._people)

    @property
    def groups(self) -> tuple[Group, ...]:
        return tuple(self._groups)

    @property
    def expenses(self) -> tuple[Expense, ...]:
        """All expenses, newest first."""
        return tuple(self._expenses)

    def get_person(self, person_id: str) -> Optional[Person]:
        return next((p for p in self._people if p.id == person_id), None)

    def get_group(self, group_id: str) -> Optional[Group]:
        return next((g for g in self._groups if g.id == group_id), None)

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        return next((e for e in self._expenses if e.id == expense_id), None)

    def person_name(self, person_id: str) -> str:
        """Display name, or "Unknown" for ids no longer in the roster."""
        person = self.get_person(person_id)
        return person.name if person else UNKNOWN_PERSON_NAME

    def snapshot(self) -> LedgerSnapshot:
        """Copy of the full state, suitable for persisting or computing on."""
        return LedgerSnapshot(
            people=[p.model_copy() for p in self._people],
            groups=[g.model_copy(deep=True) for g in self._groups],
            expenses=list(self._expenses),
        )

    def load(self, snapshot: LedgerSnapshot) -> bool:
        """
        Replace the in-memory state with a loaded snapshot.

        Returns True if the acting user was missing from the snapshot and
        had to be re-created (the caller should persist it).
        """
        people = [p.model_copy() for p in snapshot.people]
        created = not any(p.id == self._acting_user_id for p in people)
        if created:
            people.insert(0, self._acting_user())

        self._people = people
        self._groups = [g.model_copy(deep=True) for g in snapshot.groups]
        self._expenses = list(snapshot.expenses)
        return created

    # -------------------------------------------------------------------------
    # People
    # -------------------------------------------------------------------------

    def add_person(self, name: str, email: Optional[str] = None) -> Person:
        """Add a person under a fresh id. Duplicate names are allowed."""
        person = Person(
            id=self._fresh_id(p.id for p in self._people),
            name=name,
            email=email,
        )
        self._people.append(person)
        return person

    def delete_person(self, person_id: str) -> bool:
        """
        Remove a person and prune them from every group.

        The acting user is protected: deleting them is a silent no-op.
        Past expenses still reference the deleted id; balances keep
        accumulating against it.

        Groups are pruned even when the id is no longer in the roster.

        Returns True if a person or a group membership was removed.
        """
        if person_id == self._acting_user_id:
            return False

        in_roster = self.get_person(person_id) is not None
        pruned = any(person_id in g.member_ids for g in self._groups)

        self._people = [p for p in self._people if p.id != person_id]
        self._groups = [
            g.model_copy(update={"member_ids": [m for m in g.member_ids if m != person_id]})
            if person_id in g.member_ids
            else g
            for g in self._groups
        ]
        return in_roster or pruned

    # -------------------------------------------------------------------------
    # Groups
    # -------------------------------------------------------------------------

    def add_group(self, name: str, member_ids: Iterable[str] = ()) -> Group:
        group = Group(
            id=self._fresh_id(g.id for g in self._groups),
            name=name,
            member_ids=list(member_ids),
        )
        self._groups.append(group)
        return group

    def delete_group(self, group_id: str) -> bool:
        before = len(self._groups)
        self._groups = [g for g in self._groups if g.id != group_id]
        return len(self._groups) < before

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    def add_expense(self, draft: ExpenseDraft) -> Expense:
        """
        Store an expense under a fresh id, newest first.

        No check that the splits add up; see ExpenseValidator.
        """
        expense = Expense.from_draft(
            draft,
            expense_id=self._fresh_id(e.id for e in self._expenses),
        )
        self._expenses.insert(0, expense)
        return expense

    def delete_expense(self, expense_id: str) -> bool:
        """Remove an expense by id. Unknown ids are a no-op (returns False)."""
        before = len(self._expenses)
        self._expenses = [e for e in self._expenses if e.id != expense_id]
        return len(self._expenses) < before
