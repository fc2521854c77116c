"""
Two-Stage Expense Validation

The ledger core is permissive: it stores whatever ExpenseDraft it is given
and the balance engine computes over it. This module is the optional layer
that tells the caller when a draft doesn't add up.

STAGE 1 - SCHEMA VALIDATION:
- The expense has participants
- No person appears twice in the splits
- Payer and participants are known to the roster
- Percentage splits carry their percentage

STAGE 2 - SEMANTIC VALIDATION:
- Split total matches the expense amount
- Percentages sum to 100
- No negative shares

Validation NEVER fixes anything. It reports issues; the service decides
whether to accept (permissive mode) or reject (strict mode).
"""

from decimal import Decimal
from typing import Iterable, Optional

from splitledger.config import get_settings
from splitledger.models.ledger import ExpenseDraft, SplitType
from splitledger.models.validation import ValidationIssue, ValidationResult

HUNDRED = Decimal(100)


class ExpenseRejectedError(Exception):
    """Raised in strict mode when an expense fails validation."""

    def __init__(self, message: str, result: ValidationResult):
        super().__init__(message)
        self.result = result


class ExpenseValidator:
    """
    Validates expense drafts through a two-stage pipeline.

    Stage 2 only runs when stage 1 passes.
    """

    def __init__(self, tolerance: Optional[Decimal] = None):
        """
        Args:
            tolerance: Allowed gap between split total and amount.
                       Defaults to LedgerSettings.split_tolerance.
        """
        if tolerance is None:
            tolerance = get_settings().ledger.split_tolerance
        self._tolerance = tolerance

    def _validate_schema(
        self,
        draft: ExpenseDraft,
        roster_ids: Optional[set[str]],
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        if not draft.splits:
            issues.append(ValidationIssue(
                field="splits",
                issue_type="no_participants",
                message="Nobody is involved in this expense, so nobody owes anything",
                severity="error",
                suggested_fix="Select at least one person to split with",
            ))

        seen = set()
        for pid in draft.participant_ids:
            if pid in seen:
                issues.append(ValidationIssue(
                    field="splits",
                    issue_type="duplicate_participant",
                    message=f"Person {pid} appears more than once in the splits",
                    severity="error",
                    suggested_fix="Combine their shares into one split",
                ))
            seen.add(pid)

        if roster_ids is not None:
            if draft.paid_by_id not in roster_ids:
                issues.append(ValidationIssue(
                    field="paid_by_id",
                    issue_type="unknown_person",
                    message=f"Payer {draft.paid_by_id} is not in the roster",
                    severity="warning",
                ))
            for pid in sorted(seen - roster_ids):
                issues.append(ValidationIssue(
                    field="splits",
                    issue_type="unknown_person",
                    message=f"Participant {pid} is not in the roster",
                    severity="warning",
                ))

        for split in draft.splits:
            if draft.split_type == SplitType.PERCENTAGE and split.percentage is None:
                issues.append(ValidationIssue(
                    field="splits",
                    issue_type="missing_percentage",
                    message=f"Percentage split for {split.person_id} has no percentage",
                    severity="error",
                ))
            elif draft.split_type != SplitType.PERCENTAGE and split.percentage is not None:
                issues.append(ValidationIssue(
                    field="splits",
                    issue_type="unused_percentage",
                    message=(
                        f"Split for {split.person_id} carries a percentage "
                        f"but the expense is a {draft.split_type.value} split"
                    ),
                    severity="info",
                ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def _validate_semantic(
        self,
        draft: ExpenseDraft,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        gap = draft.unallocated
        if abs(gap) > self._tolerance:
            direction = "less" if gap > 0 else "more"
            issues.append(ValidationIssue(
                field="splits",
                issue_type="split_mismatch",
                message=(
                    f"Splits total {draft.split_total:.2f}, which is {abs(gap):.2f} "
                    f"{direction} than the amount {draft.amount:.2f}"
                ),
                severity="error",
                suggested_fix="Adjust the shares so they add up to the amount",
            ))

        if draft.split_type == SplitType.PERCENTAGE:
            pct_total = sum(
                (s.percentage for s in draft.splits if s.percentage is not None),
                Decimal(0),
            )
            if abs(pct_total - HUNDRED) > self._tolerance:
                issues.append(ValidationIssue(
                    field="splits",
                    issue_type="percentage_mismatch",
                    message=f"Percentages sum to {pct_total}%, not 100%",
                    severity="error",
                    suggested_fix="Adjust the percentages so they sum to 100",
                ))

        for split in draft.splits:
            if split.amount < 0:
                issues.append(ValidationIssue(
                    field="splits",
                    issue_type="negative_share",
                    message=f"Share for {split.person_id} is negative ({split.amount:.2f})",
                    severity="warning",
                ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def validate(
        self,
        draft: ExpenseDraft,
        roster_ids: Optional[Iterable[str]] = None,
    ) -> ValidationResult:
        """
        Run the full two-stage validation pipeline.

        Args:
            draft: The expense to validate
            roster_ids: Known person ids. If None, roster checks are skipped.

        Returns:
            ValidationResult with all issues found
        """
        roster = set(roster_ids) if roster_ids is not None else None
        all_issues = []

        schema_valid, schema_issues = self._validate_schema(draft, roster)
        all_issues.extend(schema_issues)

        semantic_valid = False
        if schema_valid:
            semantic_valid, semantic_issues = self._validate_semantic(draft)
            all_issues.extend(semantic_issues)

        warnings = [i.message for i in all_issues if i.severity == "warning"]

        return ValidationResult(
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            issues=all_issues,
            warnings=warnings,
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """Short text summary of a validation result for display."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []

        if result.has_errors:
            lines.append("This expense doesn't add up:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   - {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please check:")
            for warning in result.warnings:
                lines.append(f"   - {warning}")

        return "\n".join(lines)
