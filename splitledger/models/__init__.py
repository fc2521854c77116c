"""
Data Models Package

This package contains all Pydantic models used in SplitLedger.
All data flowing through the system must conform to these schemas.
"""

from splitledger.models.ledger import (
    Balance,
    Expense,
    ExpenseDraft,
    Group,
    LedgerSnapshot,
    Person,
    Split,
    SplitType,
    Transfer,
    new_record_id,
)
from splitledger.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from splitledger.models.report import (
    BalanceStatus,
    LedgerSummary,
    PersonBalanceLine,
)
from splitledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "Balance",
    "Expense",
    "ExpenseDraft",
    "Group",
    "LedgerSnapshot",
    "Person",
    "Split",
    "SplitType",
    "Transfer",
    "new_record_id",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Report models
    "BalanceStatus",
    "LedgerSummary",
    "PersonBalanceLine",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
