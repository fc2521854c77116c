"""Tests for the audit logger."""

import asyncio

from splitledger.audit import AuditLogger, create_correlation_id
from splitledger.models.audit import AuditEventBuilder, AuditEventType, AuditSeverity
from splitledger.services.storage import InMemoryAuditStorage, StorageError


class FailingAuditStorage(InMemoryAuditStorage):
    """Audit storage whose writes always fail."""

    async def append_event(self, event):
        raise StorageError("audit log unavailable")


class TestAuditLogger:
    """Local logging plus optional storage."""

    def test_events_reach_storage(self):
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        correlation_id = create_correlation_id()

        asyncio.run(logger.log_person_added("p1", "Asha", correlation_id))
        asyncio.run(logger.log_person_deleted("p1", ["g1"], correlation_id))

        events = asyncio.run(storage.get_events_by_correlation_id(correlation_id))
        assert [e.event_type for e in events] == [
            AuditEventType.PERSON_ADDED,
            AuditEventType.PERSON_DELETED,
        ]
        assert events[1].details == {"affected_group_ids": ["g1"]}

    def test_without_storage_logs_locally(self):
        logger = AuditLogger()
        event = AuditEventBuilder.expense_deleted("e1")
        assert asyncio.run(logger.log(event)) is True

    def test_storage_failure_is_swallowed(self):
        logger = AuditLogger(FailingAuditStorage())
        # must not raise
        asyncio.run(logger.log_expense_deleted("e1"))
        asyncio.run(logger.log_error("boom", "something broke"))

    def test_persistence_failure_event(self):
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)

        asyncio.run(logger.log_persistence_failed(
            event_type=AuditEventType.SAVE_FAILED,
            entity_type="expense",
            entity_id="e1",
            error_message="disk full",
        ))

        (event,) = asyncio.run(storage.get_recent_events())
        assert event.severity == AuditSeverity.ERROR
        assert event.entity_id == "e1"
        assert event.error_message == "disk full"

    def test_validation_event_type_depends_on_rejection(self):
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)

        asyncio.run(logger.log_expense_validation("Dinner", [{"field": "splits"}], rejected=False))
        asyncio.run(logger.log_expense_validation("Dinner", [{"field": "splits"}], rejected=True))

        newest, oldest = asyncio.run(storage.get_recent_events())
        assert oldest.event_type == AuditEventType.EXPENSE_VALIDATION_WARNING
        assert newest.event_type == AuditEventType.EXPENSE_REJECTED

    def test_correlation_ids_are_unique(self):
        assert create_correlation_id() != create_correlation_id()
