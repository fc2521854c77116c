"""Tests for balance computation."""

import random
from datetime import date
from decimal import Decimal

from splitledger.balances import (
    balance_map,
    compute_balances,
    equal_splits,
    is_conserved,
    total_unallocated,
)
from splitledger.models.ledger import (
    Expense,
    Person,
    Split,
    SplitType,
)

PEOPLE = [
    Person(id="1", name="You"),
    Person(id="2", name="Asha"),
    Person(id="3", name="Ravi"),
]


def _expense(expense_id, amount, paid_by_id, splits, split_type=SplitType.EQUAL):
    return Expense(
        id=expense_id,
        description=f"Expense {expense_id}",
        amount=Decimal(amount),
        date=date(2024, 12, 1),
        paid_by_id=paid_by_id,
        splits=splits,
        split_type=split_type,
    )


def _equal(expense_id, amount, paid_by_id, person_ids):
    return _expense(expense_id, amount, paid_by_id, equal_splits(Decimal(amount), person_ids))


class TestComputeBalances:
    """Net balance derivation."""

    def test_empty_ledger_gives_zero_for_everyone(self):
        balances = compute_balances(PEOPLE, [])
        assert [b.person_id for b in balances] == ["1", "2", "3"]
        assert all(b.amount == Decimal("0") for b in balances)

    def test_equal_split_three_people_300(self):
        """Payer gets +200, each other participant -100."""
        expense = _equal("e1", "300", "1", ["1", "2", "3"])
        balances = balance_map(compute_balances(PEOPLE, [expense]))
        assert balances == {
            "1": Decimal("200"),
            "2": Decimal("-100"),
            "3": Decimal("-100"),
        }

    def test_payer_only_expense_changes_nothing(self):
        expense = _expense("e1", "75", "2", [Split(person_id="2", amount=Decimal("75"))])
        balances = compute_balances(PEOPLE, [expense])
        assert all(b.amount == Decimal("0") for b in balances)

    def test_payer_not_in_split_is_credited_in_full(self):
        expense = _equal("e1", "100", "1", ["2", "3"])
        balances = balance_map(compute_balances(PEOPLE, [expense]))
        assert balances["1"] == Decimal("100")
        assert balances["2"] == Decimal("-50")

    def test_conservation_over_mixed_ledger(self):
        expenses = [
            _equal("e1", "100", "1", ["1", "2", "3"]),
            _equal("e2", "45.50", "2", ["2", "3"]),
            _expense(
                "e3", "80", "3",
                [
                    Split(person_id="1", amount=Decimal("20"), percentage=Decimal("25")),
                    Split(person_id="3", amount=Decimal("60"), percentage=Decimal("75")),
                ],
                SplitType.PERCENTAGE,
            ),
        ]
        balances = compute_balances(PEOPLE, expenses)
        assert is_conserved(balances)
        assert abs(sum(b.amount for b in balances)) < Decimal("1e-20")

    def test_sum_equals_unallocated_when_not_fully_split(self):
        """Test that under-allocated expenses surface as a non-zero total."""
        expenses = [
            _expense("e1", "100", "1", [Split(person_id="2", amount=Decimal("60"))],
                     SplitType.EXACT),
            _equal("e2", "30", "2", ["1", "2"]),
        ]
        balances = compute_balances(PEOPLE, expenses)
        total = sum(b.amount for b in balances)
        assert total == Decimal("40")
        assert total == total_unallocated(expenses)
        assert not is_conserved(balances)

    def test_zero_participant_expense_credits_payer_only(self):
        expense = _expense("e1", "50", "1", [])
        balances = balance_map(compute_balances(PEOPLE, [expense]))
        assert balances["1"] == Decimal("50")
        assert sum(balances.values()) == Decimal("50")

    def test_dangling_ids_still_accumulate(self):
        """Test that a deleted person's id keeps its balance entry."""
        expenses = [
            _equal("e1", "90", "gone", ["1", "gone", "also-gone"]),
        ]
        balances = compute_balances(PEOPLE, expenses)
        ids = [b.person_id for b in balances]
        assert ids == ["1", "2", "3", "gone", "also-gone"]
        mapped = balance_map(balances)
        assert mapped["gone"] == Decimal("60")
        assert mapped["also-gone"] == Decimal("-30")

    def test_deterministic_and_order_independent(self):
        expenses = [
            _equal("e1", "120", "1", ["1", "2", "3"]),
            _equal("e2", "33", "2", ["1", "2"]),
            _equal("e3", "10", "3", ["3", "1"]),
            _equal("e4", "7.77", "1", ["2"]),
        ]
        first = compute_balances(PEOPLE, expenses)
        second = compute_balances(PEOPLE, expenses)
        assert first == second

        shuffled = list(expenses)
        random.Random(4).shuffle(shuffled)
        assert balance_map(compute_balances(PEOPLE, shuffled)) == balance_map(first)

    def test_accepts_generators(self):
        expense = _equal("e1", "20", "1", ["1", "2"])
        balances = compute_balances(iter(PEOPLE), iter([expense]))
        assert balance_map(balances)["2"] == Decimal("-10")
