"""
Report Models

Read-only views over the ledger from the acting user's point of view.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from splitledger.models.ledger import Transfer


class BalanceStatus(str, Enum):
    """Where another person stands relative to the acting user's dashboard."""
    OWES_YOU = "owes_you"
    YOU_OWE = "you_owe"
    SETTLED_UP = "settled_up"


class PersonBalanceLine(BaseModel):
    """One row of the balances dashboard."""

    person_id: str
    name: str
    amount: Decimal
    status: BalanceStatus
    in_roster: bool = Field(
        default=True,
        description="False for ids only referenced by old expenses"
    )


class LedgerSummary(BaseModel):
    """Everything the dashboard shows, computed in one pass."""

    acting_user_id: str
    total_balance: Decimal = Field(
        ...,
        description="Acting user's balance; positive means they are owed in total"
    )
    others: list[PersonBalanceLine] = Field(default_factory=list)
    settlement_plan: list[Transfer] = Field(default_factory=list)
    unallocated_total: Decimal = Field(
        default=Decimal(0),
        description="Sum of balances; non-zero when some expense isn't fully split"
    )
    expense_count: int = Field(default=0, ge=0)
