"""
Core Ledger Models for SplitLedger

These models define the schemas for everything the ledger holds and derives:
people, groups, expenses with their splits, and the balances and transfers
computed from them.

DESIGN DECISION: Money is always Decimal. Shares produced by dividing an
expense (e.g. 100 / 3) are kept at full precision and never rounded at
intermediate steps, so balances accumulate without float drift.

Type-level problems (missing fields, non-positive expense amounts) are
rejected here, at the boundary. Semantic problems (splits that don't add up)
are NOT rejected here - see splitledger.validation.
"""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


def new_record_id() -> str:
    """Generate a fresh application-level record id."""
    return uuid4().hex


# =============================================================================
# ENUMS
# =============================================================================

class SplitType(str, Enum):
    """
    How an expense's cost is divided between the people involved.

    The split type only records the basis used to build the splits.
    Split.amount is always the actual currency value owed.
    """
    EQUAL = "equal"
    PERCENTAGE = "percentage"
    EXACT = "exact"


# =============================================================================
# ROSTER
# =============================================================================

class Person(BaseModel):
    """
    A participant in shared expenses.

    Identity is `id`. Names are not unique.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Unique person id within the roster"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name"
    )
    email: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Contact email if known"
    )


class Group(BaseModel):
    """
    An organizational grouping of people.

    Groups have no effect on balance computation.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    member_ids: list[str] = Field(
        default_factory=list,
        description="Ids of member people (order preserved, no duplicates)"
    )

    @field_validator('member_ids')
    @classmethod
    def dedupe_members(cls, v: list[str]) -> list[str]:
        return list(dict.fromkeys(v))


# =============================================================================
# EXPENSES
# =============================================================================

class Split(BaseModel):
    """One person's share of one expense."""
    model_config = ConfigDict(frozen=True)

    person_id: str = Field(
        ...,
        min_length=1,
        description="Person who owes this share"
    )
    amount: Decimal = Field(
        ...,
        description="Currency value owed (signed)"
    )
    percentage: Optional[Decimal] = Field(
        default=None,
        description="Percentage basis, for percentage splits only"
    )


class ExpenseDraft(BaseModel):
    """
    An expense as submitted by a collaborator, before the store assigns an id.

    CRITICAL: No check is made here that the splits add up to the amount.
    The core is permissive; the validator reports mismatches.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount the payer fronted"
    )
    date: datetime.date = Field(
        default_factory=datetime.date.today,
        description="Date of the expense"
    )
    paid_by_id: str = Field(
        ...,
        min_length=1,
        description="Person who paid"
    )
    splits: tuple[Split, ...] = Field(
        default_factory=tuple,
        description="Per-person shares, only for the people involved"
    )
    split_type: SplitType = Field(
        default=SplitType.EQUAL,
    )
    group_id: Optional[str] = None

    @property
    def split_total(self) -> Decimal:
        """Total liability created by the splits."""
        return sum((s.amount for s in self.splits), Decimal(0))

    @property
    def unallocated(self) -> Decimal:
        """Part of the amount not covered by any split (zero when fully split)."""
        return self.amount - self.split_total

    @property
    def participant_ids(self) -> list[str]:
        return [s.person_id for s in self.splits]

    def share_of(self, person_id: str) -> Decimal:
        """Sum of the given person's splits on this expense."""
        return sum(
            (s.amount for s in self.splits if s.person_id == person_id),
            Decimal(0),
        )


class Expense(ExpenseDraft):
    """
    A stored expense.

    Immutable once created. The only lifecycle change is full deletion.
    """

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Unique expense id"
    )

    @classmethod
    def from_draft(cls, draft: ExpenseDraft, expense_id: Optional[str] = None) -> 'Expense':
        return cls(id=expense_id or new_record_id(), **draft.model_dump())


# =============================================================================
# DERIVED VALUES
# =============================================================================

class Balance(BaseModel):
    """
    A person's net position across the ledger.

    Positive means others owe them, negative means they owe others.
    Derived on every read; never stored.
    """
    model_config = ConfigDict(frozen=True)

    person_id: str
    amount: Decimal = Field(default=Decimal(0))


class Transfer(BaseModel):
    """One step of a settlement plan: `from_person_id` pays `to_person_id`."""
    model_config = ConfigDict(frozen=True)

    from_person_id: str
    to_person_id: str
    amount: Decimal = Field(..., gt=0)


class LedgerSnapshot(BaseModel):
    """
    Full ledger state at a point in time.

    This is what storage backends load and what LedgerStore.snapshot() returns.
    Expenses are newest-first.
    """

    people: list[Person] = Field(default_factory=list)
    groups: list[Group] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
