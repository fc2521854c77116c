"""
Main Orchestrator for SplitLedger

This module ties the components together for every user action:

    mutate LedgerStore  ->  persist full record (upsert by id)  ->  audit

DESIGN DECISION: The in-memory store is the source of truth for the
session. Persistence is best-effort:
- It runs AFTER the in-memory change, with the full updated record
- Transient connection errors are retried (tenacity)
- Any remaining failure is logged and swallowed; it never rolls back or
  blocks the mutation
- No transaction spans several records, so partial application (person
  deleted, one group re-save failed) is possible and tolerated

Balances are never stored: balances(), settlement_plan() and summary()
recompute from the current ledger on every call.
"""

from datetime import date
from decimal import Decimal
from typing import Awaitable, Callable, Iterable, Mapping, Optional
from uuid import UUID

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from splitledger.audit import AuditLogger, configure_logging, create_correlation_id
from splitledger.balances import (
    build_splits,
    compute_balances,
    compute_settlement_plan,
)
from splitledger.config import LedgerSettings, StorageSettings, get_settings
from splitledger.ledger import LedgerStore
from splitledger.models.audit import AuditEventType
from splitledger.models.ledger import (
    Balance,
    Expense,
    ExpenseDraft,
    Group,
    LedgerSnapshot,
    Person,
    SplitType,
    Transfer,
)
from splitledger.models.report import LedgerSummary
from splitledger.queries import BalanceReporter
from splitledger.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    LedgerStorageInterface,
    StorageConnectionError,
)
from splitledger.validation import ExpenseRejectedError, ExpenseValidator


class LedgerService:
    """
    Orchestrates ledger mutations, persistence and auditing.

    All collaborators are injected; nothing here reaches for a global.
    """

    def __init__(
        self,
        store: Optional[LedgerStore] = None,
        storage: Optional[LedgerStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[ExpenseValidator] = None,
        ledger_settings: Optional[LedgerSettings] = None,
        storage_settings: Optional[StorageSettings] = None,
    ):
        if ledger_settings is None or storage_settings is None:
            settings = get_settings()
            ledger_settings = ledger_settings or settings.ledger
            storage_settings = storage_settings or settings.storage
        self._settings = ledger_settings
        self._storage_settings = storage_settings

        self._store = store or LedgerStore(
            acting_user_id=self._settings.acting_user_id,
            acting_user_name=self._settings.acting_user_name,
        )
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._validator = validator or ExpenseValidator(self._settings.split_tolerance)
        self._reporter = BalanceReporter(self._store, self._settings.settlement_epsilon)

    @property
    def store(self) -> LedgerStore:
        return self._store

    @property
    def reporter(self) -> BalanceReporter:
        return self._reporter

    # -------------------------------------------------------------------------
    # Persistence plumbing
    # -------------------------------------------------------------------------

    async def _persist(
        self,
        call: Callable[[], Awaitable[bool]],
        failure_type: AuditEventType,
        entity_type: str,
        entity_id: Optional[str],
        correlation_id: Optional[UUID],
    ) -> bool:
        """
        Run one storage call with retries.

        Returns False (after logging) instead of raising: persistence
        failures must not interrupt the session.
        """
        if self._storage is None:
            return True

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._storage_settings.retry_attempts),
                wait=wait_exponential(
                    multiplier=self._storage_settings.retry_wait_min,
                    min=self._storage_settings.retry_wait_min,
                    max=self._storage_settings.retry_wait_max,
                ),
                retry=retry_if_exception_type(StorageConnectionError),
                reraise=True,
            ):
                with attempt:
                    return await call()
        except Exception as e:
            await self._audit_logger.log_persistence_failed(
                event_type=failure_type,
                entity_type=entity_type,
                entity_id=entity_id,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return False

    async def _save_person(self, person: Person, correlation_id: Optional[UUID]) -> bool:
        return await self._persist(
            lambda: self._storage.save_person(person),
            AuditEventType.SAVE_FAILED, "person", person.id, correlation_id,
        )

    async def _save_group(self, group: Group, correlation_id: Optional[UUID]) -> bool:
        return await self._persist(
            lambda: self._storage.save_group(group),
            AuditEventType.SAVE_FAILED, "group", group.id, correlation_id,
        )

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def load_state(self, correlation_id: Optional[UUID] = None) -> bool:
        """
        Replace the session state with what storage holds.

        If the stored roster has no acting user, it is re-created and saved.
        On failure the current in-memory state is kept.

        Returns True if state was loaded.
        """
        if self._storage is None:
            return False
        correlation_id = correlation_id or create_correlation_id()

        try:
            snapshot = await self._storage.load_state()
        except Exception as e:
            await self._audit_logger.log_persistence_failed(
                event_type=AuditEventType.LOAD_FAILED,
                entity_type="ledger",
                entity_id=None,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return False

        if self._store.load(snapshot):
            acting_user = self._store.get_person(self._store.acting_user_id)
            await self._save_person(acting_user, correlation_id)

        await self._audit_logger.log_state_loaded(
            people=len(self._store.people),
            groups=len(self._store.groups),
            expenses=len(self._store.expenses),
            correlation_id=correlation_id,
        )
        return True

    # -------------------------------------------------------------------------
    # People
    # -------------------------------------------------------------------------

    async def add_person(
        self,
        name: str,
        email: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> Person:
        correlation_id = correlation_id or create_correlation_id()

        person = self._store.add_person(name, email=email)
        await self._audit_logger.log_person_added(person.id, person.name, correlation_id)
        await self._save_person(person, correlation_id)
        return person

    async def delete_person(
        self,
        person_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Delete a person and re-save every group they were pruned from.

        Deleting the acting user is a silent no-op (logged, not raised).
        """
        correlation_id = correlation_id or create_correlation_id()

        if person_id == self._store.acting_user_id:
            await self._audit_logger.log_person_delete_rejected(
                person_id, "the acting user cannot be deleted", correlation_id,
            )
            return False

        affected_ids = [g.id for g in self._store.groups if person_id in g.member_ids]
        removed = self._store.delete_person(person_id)
        if removed:
            await self._audit_logger.log_person_deleted(person_id, affected_ids, correlation_id)

        await self._persist(
            lambda: self._storage.delete_person(person_id),
            AuditEventType.DELETE_FAILED, "person", person_id, correlation_id,
        )

        for group_id in affected_ids:
            group = self._store.get_group(group_id)
            await self._audit_logger.log_group_changed(
                AuditEventType.GROUP_UPDATED, group.id, group.name,
                len(group.member_ids), correlation_id,
            )
            await self._save_group(group, correlation_id)

        return removed

    # -------------------------------------------------------------------------
    # Groups
    # -------------------------------------------------------------------------

    async def add_group(
        self,
        name: str,
        member_ids: Iterable[str] = (),
        correlation_id: Optional[UUID] = None,
    ) -> Group:
        correlation_id = correlation_id or create_correlation_id()

        group = self._store.add_group(name, member_ids)
        await self._audit_logger.log_group_changed(
            AuditEventType.GROUP_ADDED, group.id, group.name,
            len(group.member_ids), correlation_id,
        )
        await self._save_group(group, correlation_id)
        return group

    async def delete_group(
        self,
        group_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        correlation_id = correlation_id or create_correlation_id()

        group = self._store.get_group(group_id)
        removed = self._store.delete_group(group_id)
        if removed:
            await self._audit_logger.log_group_changed(
                AuditEventType.GROUP_DELETED, group.id, group.name,
                len(group.member_ids), correlation_id,
            )

        await self._persist(
            lambda: self._storage.delete_group(group_id),
            AuditEventType.DELETE_FAILED, "group", group_id, correlation_id,
        )
        return removed

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    async def add_expense(
        self,
        draft: ExpenseDraft,
        correlation_id: Optional[UUID] = None,
    ) -> Expense:
        """
        Validate, store and persist an expense.

        Raises:
            ExpenseRejectedError: In strict mode, if validation finds errors.
                                  The store is left untouched.
        """
        correlation_id = correlation_id or create_correlation_id()

        result = self._validator.validate(draft, roster_ids=(p.id for p in self._store.people))
        if result.issues:
            rejected = self._settings.strict_split_validation and result.has_errors
            await self._audit_logger.log_expense_validation(
                description=draft.description,
                issues=[i.model_dump() for i in result.issues],
                rejected=rejected,
                correlation_id=correlation_id,
            )
            if rejected:
                raise ExpenseRejectedError(
                    self._validator.get_user_friendly_summary(result),
                    result,
                )

        expense = self._store.add_expense(draft)
        await self._audit_logger.log_expense_added(
            expense_id=expense.id,
            description=expense.description,
            amount=f"{self._settings.currency} {expense.amount}",
            paid_by_id=expense.paid_by_id,
            correlation_id=correlation_id,
        )
        await self._persist(
            lambda: self._storage.save_expense(expense),
            AuditEventType.SAVE_FAILED, "expense", expense.id, correlation_id,
        )
        return expense

    async def record_expense(
        self,
        description: str,
        amount: Decimal,
        paid_by_id: str,
        person_ids: Iterable[str],
        split_type: SplitType = SplitType.EQUAL,
        values: Optional[Mapping[str, Decimal]] = None,
        expense_date: Optional[date] = None,
        group_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> Expense:
        """
        Build the splits for an expense and add it.

        Args:
            person_ids: People involved in the split
            values: Percentages (percentage split) or amounts (exact split)
                    keyed by person id
        """
        amount = Decimal(str(amount))
        splits = build_splits(split_type, amount, person_ids, values)
        draft = ExpenseDraft(
            description=description,
            amount=amount,
            date=expense_date or date.today(),
            paid_by_id=paid_by_id,
            splits=splits,
            split_type=split_type,
            group_id=group_id,
        )
        return await self.add_expense(draft, correlation_id=correlation_id)

    async def delete_expense(
        self,
        expense_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Delete an expense. Deleting an unknown id is a no-op."""
        correlation_id = correlation_id or create_correlation_id()

        removed = self._store.delete_expense(expense_id)
        if removed:
            await self._audit_logger.log_expense_deleted(expense_id, correlation_id)

        await self._persist(
            lambda: self._storage.delete_expense(expense_id),
            AuditEventType.DELETE_FAILED, "expense", expense_id, correlation_id,
        )
        return removed

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def balances(self) -> list[Balance]:
        return compute_balances(self._store.people, self._store.expenses)

    def settlement_plan(self) -> list[Transfer]:
        return compute_settlement_plan(self.balances(), self._settings.settlement_epsilon)

    def summary(self) -> LedgerSummary:
        return self._reporter.summary()

    def snapshot(self) -> LedgerSnapshot:
        return self._store.snapshot()


def create_app_components(
    storage: Optional[LedgerStorageInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
    use_storage: bool = True,
) -> LedgerService:
    """
    Factory function to create a wired LedgerService.

    Args:
        storage: Ledger backend. Defaults to in-memory storage.
        audit_storage: Audit backend. Defaults to in-memory storage.
        use_storage: Set to False for a purely in-memory session with
                     local-only audit logging.
    """
    configure_logging()

    if not use_storage:
        return LedgerService(audit_logger=AuditLogger())

    storage = storage or InMemoryLedgerStorage()
    audit_storage = audit_storage or InMemoryAuditStorage()

    return LedgerService(
        storage=storage,
        audit_logger=AuditLogger(audit_storage),
    )
