"""Tests for dashboard reports."""

from datetime import date
from decimal import Decimal

from splitledger.balances import equal_splits
from splitledger.ledger import LedgerStore
from splitledger.models.ledger import ExpenseDraft
from splitledger.models.report import BalanceStatus
from splitledger.queries import BalanceReporter


def _add(store, amount, paid_by_id, person_ids):
    return store.add_expense(ExpenseDraft(
        description="Shared",
        amount=Decimal(amount),
        date=date(2024, 12, 1),
        paid_by_id=paid_by_id,
        splits=equal_splits(Decimal(amount), person_ids),
    ))


class TestBalanceReporter:
    """Acting-user views over the ledger."""

    def setup_method(self):
        self.store = LedgerStore()
        self.asha = self.store.add_person("Asha")
        self.ravi = self.store.add_person("Ravi")
        self.reporter = BalanceReporter(self.store)

    def test_total_for_acting_user(self):
        _add(self.store, "300", "1", ["1", self.asha.id, self.ravi.id])
        assert self.reporter.total_for_acting_user() == Decimal("200")

    def test_other_balances_statuses(self):
        _add(self.store, "100", "1", ["1", self.asha.id])
        _add(self.store, "40", self.ravi.id, [self.ravi.id, self.asha.id])
        _add(self.store, "10", self.ravi.id, [self.ravi.id])

        lines = {line.name: line for line in self.reporter.other_balances()}
        assert "You" not in lines
        assert lines["Asha"].amount == Decimal("-70")
        assert lines["Asha"].status == BalanceStatus.YOU_OWE
        assert lines["Ravi"].amount == Decimal("20")
        assert lines["Ravi"].status == BalanceStatus.OWES_YOU

    def test_settled_up(self):
        lines = self.reporter.other_balances()
        assert all(line.status == BalanceStatus.SETTLED_UP for line in lines)

    def test_orphans_listed_as_unknown(self):
        _add(self.store, "50", "1", ["1", self.asha.id])
        self.store.delete_person(self.asha.id)

        lines = self.reporter.other_balances()
        orphan = next(line for line in lines if line.person_id == self.asha.id)
        assert orphan.name == "Unknown"
        assert orphan.in_roster is False

        hidden = self.reporter.other_balances(include_orphans=False)
        assert all(line.person_id != self.asha.id for line in hidden)

    def test_my_share(self):
        mine = _add(self.store, "90", "1", ["1", self.asha.id])
        theirs = _add(self.store, "90", self.asha.id, ["1", self.asha.id])
        not_involved = _add(self.store, "90", self.asha.id, [self.ravi.id])

        assert self.reporter.my_share(mine) == Decimal("0")
        assert self.reporter.my_share(theirs) == Decimal("45")
        assert self.reporter.my_share(not_involved) == Decimal("0")

    def test_summary(self):
        _add(self.store, "300", "1", ["1", self.asha.id, self.ravi.id])

        summary = self.reporter.summary()
        assert summary.acting_user_id == "1"
        assert summary.total_balance == Decimal("200")
        assert summary.expense_count == 1
        assert summary.unallocated_total == Decimal("0")
        assert len(summary.others) == 2
        assert {t.to_person_id for t in summary.settlement_plan} == {"1"}
        assert sum(t.amount for t in summary.settlement_plan) == Decimal("200")

    def test_summary_recomputes_after_mutation(self):
        expense = _add(self.store, "300", "1", ["1", self.asha.id, self.ravi.id])
        assert self.reporter.summary().total_balance == Decimal("200")

        self.store.delete_expense(expense.id)
        assert self.reporter.summary().total_balance == Decimal("0")
