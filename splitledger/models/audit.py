"""
Audit Models for SplitLedger

Every ledger mutation, and every persistence failure around it, is logged
as an audit event. This gives:
1. A history of who was added, what was spent, what was removed
2. Visibility into writes the backing store refused
3. A way to reconstruct the session when the in-memory view and the
   store disagree

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Roster
    PERSON_ADDED = "person_added"
    PERSON_DELETED = "person_deleted"
    PERSON_DELETE_REJECTED = "person_delete_rejected"

    # Groups
    GROUP_ADDED = "group_added"
    GROUP_UPDATED = "group_updated"
    GROUP_DELETED = "group_deleted"

    # Expenses
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSE_VALIDATION_WARNING = "expense_validation_warning"
    EXPENSE_REJECTED = "expense_rejected"

    # Persistence
    STATE_LOADED = "state_loaded"
    LOAD_FAILED = "load_failed"
    SAVE_FAILED = "save_failed"
    DELETE_FAILED = "delete_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every ledger mutation creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what record is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of record (person, group, expense, ledger)"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Application-level id of the record"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g. a person delete and its group updates)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.person_added(person_id, name, correlation_id)
        event = AuditEventBuilder.persistence_failed(
            AuditEventType.SAVE_FAILED, "expense", expense_id, str(e), correlation_id,
        )
    """

    @staticmethod
    def person_added(
        person_id: str,
        name: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSON_ADDED,
            entity_type="person",
            entity_id=person_id,
            correlation_id=correlation_id,
            description=f"Person added: {name}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def person_deleted(
        person_id: str,
        affected_group_ids: list[str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSON_DELETED,
            entity_type="person",
            entity_id=person_id,
            correlation_id=correlation_id,
            description=f"Person deleted, removed from {len(affected_group_ids)} group(s)",
            details={"affected_group_ids": affected_group_ids},
            is_user_action=True,
        )

    @staticmethod
    def person_delete_rejected(
        person_id: str,
        reason: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSON_DELETE_REJECTED,
            entity_type="person",
            entity_id=person_id,
            correlation_id=correlation_id,
            description=f"Person not deleted: {reason}",
            details={"reason": reason},
            is_user_action=True,
        )

    @staticmethod
    def group_changed(
        event_type: AuditEventType,
        group_id: str,
        name: str,
        member_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        verb = event_type.value.split("_")[-1]
        return AuditEvent(
            event_type=event_type,
            entity_type="group",
            entity_id=group_id,
            correlation_id=correlation_id,
            description=f"Group {verb}: {name}",
            details={"name": name, "member_count": member_count},
            is_user_action=event_type != AuditEventType.GROUP_UPDATED,
        )

    @staticmethod
    def expense_added(
        expense_id: str,
        description: str,
        amount: str,
        paid_by_id: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense added: {description} - {amount}",
            details={
                "amount": amount,
                "paid_by_id": paid_by_id,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(
        expense_id: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description="Expense deleted",
            is_user_action=True,
        )

    @staticmethod
    def expense_validation(
        description: str,
        issues: list[dict],
        rejected: bool,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=(
                AuditEventType.EXPENSE_REJECTED
                if rejected
                else AuditEventType.EXPENSE_VALIDATION_WARNING
            ),
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            correlation_id=correlation_id,
            description=(
                f"Expense {'rejected' if rejected else 'accepted'} "
                f"with {len(issues)} validation issue(s): {description}"
            ),
            details={"issues": issues},
        )

    @staticmethod
    def state_loaded(
        people: int,
        groups: int,
        expenses: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Ledger loaded: {people} people, {groups} groups, {expenses} expenses",
            details={"people": people, "groups": groups, "expenses": expenses},
        )

    @staticmethod
    def persistence_failed(
        event_type: AuditEventType,
        entity_type: str,
        entity_id: Optional[str],
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=event_type,
            severity=AuditSeverity.ERROR,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Persistence failed for {entity_type}; in-memory state kept",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
