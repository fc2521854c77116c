"""Tests for split construction."""

import pytest
from decimal import Decimal

from splitledger.balances.splits import (
    build_splits,
    equal_splits,
    exact_splits,
    percentage_splits,
)
from splitledger.models.ledger import SplitType


class TestEqualSplits:
    """Equal division of an expense."""

    def test_three_way_split_of_300(self):
        splits = equal_splits(Decimal("300"), ["1", "2", "3"])
        assert [s.person_id for s in splits] == ["1", "2", "3"]
        assert all(s.amount == Decimal("100") for s in splits)
        assert all(s.percentage is None for s in splits)

    def test_no_participants_means_no_splits(self):
        """Test that an empty involvement set doesn't divide by zero."""
        assert equal_splits(Decimal("50"), []) == []

    def test_duplicate_participants_collapse(self):
        splits = equal_splits(Decimal("100"), ["1", "2", "1"])
        assert [s.person_id for s in splits] == ["1", "2"]
        assert all(s.amount == Decimal("50") for s in splits)

    def test_shares_are_not_rounded(self):
        """Test that 100 / 3 keeps full precision."""
        splits = equal_splits(Decimal("100"), ["1", "2", "3"])
        assert splits[0].amount == Decimal("100") / Decimal("3")
        assert splits[0].amount != Decimal("33.33")
        total = sum(s.amount for s in splits)
        assert abs(total - Decimal("100")) < Decimal("1e-20")

    def test_accepts_float_total(self):
        """Test that float input doesn't carry binary noise."""
        splits = equal_splits(0.3, ["1", "2", "3"])
        assert splits[0].amount == Decimal("0.1")


class TestPercentageSplits:
    """Percentage-based division."""

    def test_amount_is_total_times_percentage(self):
        splits = percentage_splits(
            Decimal("200"), ["1", "2"], {"1": Decimal("25"), "2": Decimal("75")},
        )
        assert splits[0].amount == Decimal("50")
        assert splits[0].percentage == Decimal("25")
        assert splits[1].amount == Decimal("150")
        assert splits[1].percentage == Decimal("75")

    def test_missing_percentage_counts_as_zero(self):
        splits = percentage_splits(Decimal("100"), ["1", "2"], {"1": Decimal("100")})
        assert splits[1].amount == Decimal("0")
        assert splits[1].percentage == Decimal("0")

    def test_under_allocation_is_not_rejected(self):
        """Test that percentages not summing to 100 still produce splits."""
        splits = percentage_splits(
            Decimal("100"), ["1", "2"], {"1": Decimal("30"), "2": Decimal("30")},
        )
        assert sum(s.amount for s in splits) == Decimal("60")


class TestExactSplits:
    """Exact amounts."""

    def test_amounts_used_as_given(self):
        splits = exact_splits(["1", "2"], {"1": Decimal("12.50"), "2": Decimal("7.50")})
        assert [s.amount for s in splits] == [Decimal("12.50"), Decimal("7.50")]

    def test_missing_amount_counts_as_zero(self):
        splits = exact_splits(["1", "2"], {"2": Decimal("5")})
        assert splits[0].amount == Decimal("0")


class TestBuildSplits:
    """Dispatch on split type."""

    @pytest.mark.parametrize("split_type", ["equal", SplitType.EQUAL])
    def test_equal_ignores_values(self, split_type):
        splits = build_splits(split_type, Decimal("90"), ["1", "2"], {"1": Decimal("80")})
        assert [s.amount for s in splits] == [Decimal("45"), Decimal("45")]

    def test_percentage(self):
        splits = build_splits(
            SplitType.PERCENTAGE, Decimal("80"), ["1", "2"],
            {"1": Decimal("50"), "2": Decimal("50")},
        )
        assert [s.amount for s in splits] == [Decimal("40"), Decimal("40")]

    def test_exact(self):
        splits = build_splits(SplitType.EXACT, Decimal("80"), ["1"], {"1": Decimal("80")})
        assert splits[0].amount == Decimal("80")

    def test_unknown_split_type(self):
        with pytest.raises(ValueError):
            build_splits("shares", Decimal("10"), ["1"])
