"""
Balance Reports

DESIGN DECISION: Reports are DETERMINISTIC reads over the current store.
They never cache; every call recomputes balances from the full ledger
through the balance engine, so a report can't disagree with the ledger.
"""

from decimal import Decimal
from typing import Optional

from splitledger.balances import (
    DEFAULT_EPSILON,
    balance_map,
    compute_balances,
    compute_settlement_plan,
)
from splitledger.ledger import LedgerStore
from splitledger.models.ledger import Balance, Expense
from splitledger.models.report import (
    BalanceStatus,
    LedgerSummary,
    PersonBalanceLine,
)


class BalanceReporter:
    """
    Builds the dashboard views for the acting user.

    Mirrors what the presentation layer shows: the acting user's total,
    every other person's balance with an "owes you / you owe" status, and
    the acting user's share of each expense.
    """

    def __init__(self, store: LedgerStore, epsilon: Decimal = DEFAULT_EPSILON):
        self._store = store
        self._epsilon = epsilon

    def balances(self) -> list[Balance]:
        return compute_balances(self._store.people, self._store.expenses)

    def total_for_acting_user(self, balances: Optional[list[Balance]] = None) -> Decimal:
        """Acting user's balance (zero if they have none)."""
        if balances is None:
            balances = self.balances()
        return balance_map(balances).get(self._store.acting_user_id, Decimal(0))

    def _status(self, amount: Decimal) -> BalanceStatus:
        if amount > self._epsilon:
            return BalanceStatus.OWES_YOU
        if amount < -self._epsilon:
            return BalanceStatus.YOU_OWE
        return BalanceStatus.SETTLED_UP

    def other_balances(
        self,
        balances: Optional[list[Balance]] = None,
        include_orphans: bool = True,
    ) -> list[PersonBalanceLine]:
        """
        Every balance except the acting user's.

        Status is read the way the dashboard reads it: a positive balance
        means that person is owed, shown to the acting user as "owes you".

        Args:
            include_orphans: Also list ids that are only referenced by
                             expenses (their person was deleted).
        """
        if balances is None:
            balances = self.balances()

        lines = []
        for balance in balances:
            if balance.person_id == self._store.acting_user_id:
                continue
            in_roster = self._store.get_person(balance.person_id) is not None
            if not in_roster and not include_orphans:
                continue
            lines.append(PersonBalanceLine(
                person_id=balance.person_id,
                name=self._store.person_name(balance.person_id),
                amount=balance.amount,
                status=self._status(balance.amount),
                in_roster=in_roster,
            ))
        return lines

    def my_share(self, expense: Expense) -> Decimal:
        """
        Acting user's share of one expense.

        Zero when the acting user paid: they don't "owe" on their own expense.
        """
        if expense.paid_by_id == self._store.acting_user_id:
            return Decimal(0)
        return expense.share_of(self._store.acting_user_id)

    def summary(self) -> LedgerSummary:
        """Full dashboard in one pass over the ledger."""
        balances = self.balances()
        return LedgerSummary(
            acting_user_id=self._store.acting_user_id,
            total_balance=self.total_for_acting_user(balances),
            others=self.other_balances(balances),
            settlement_plan=compute_settlement_plan(balances, self._epsilon),
            unallocated_total=sum((b.amount for b in balances), Decimal(0)),
            expense_count=len(self._store.expenses),
        )
