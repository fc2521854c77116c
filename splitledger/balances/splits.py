"""
Split Construction

Turns "who is involved and on what basis" into the list of Split records an
ExpenseDraft carries. The collaborator (form, import, test) calls these
before handing the draft to the store.

IMPORTANT: None of these functions reject shares that don't reconcile with
the total. Percentages that don't sum to 100, or exact amounts that don't
sum to the expense, produce splits anyway. Use ExpenseValidator to find out.
"""

from decimal import Decimal
from typing import Iterable, Mapping, Optional

from splitledger.models.ledger import Split, SplitType

HUNDRED = Decimal(100)


def _unique(person_ids: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(person_ids))


def _as_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats like 0.1 don't carry binary noise
    return Decimal(str(value))


def equal_splits(total: Decimal, person_ids: Iterable[str]) -> list[Split]:
    """
    Divide `total` evenly between everyone involved.

    With nobody involved there are no splits: the share is defined as zero
    and the expense creates no liability.
    """
    involved = _unique(person_ids)
    if not involved:
        return []

    share = _as_decimal(total) / Decimal(len(involved))
    return [Split(person_id=pid, amount=share) for pid in involved]


def percentage_splits(
    total: Decimal,
    person_ids: Iterable[str],
    percentages: Mapping[str, Decimal],
) -> list[Split]:
    """Each person owes `total * p / 100`. A missing percentage counts as 0."""
    total = _as_decimal(total)
    splits = []
    for pid in _unique(person_ids):
        pct = _as_decimal(percentages.get(pid, 0))
        splits.append(Split(
            person_id=pid,
            amount=total * pct / HUNDRED,
            percentage=pct,
        ))
    return splits


def exact_splits(
    person_ids: Iterable[str],
    amounts: Mapping[str, Decimal],
) -> list[Split]:
    """Each person owes the amount given for them. A missing amount counts as 0."""
    return [
        Split(person_id=pid, amount=_as_decimal(amounts.get(pid, 0)))
        for pid in _unique(person_ids)
    ]


def build_splits(
    split_type: SplitType,
    total: Decimal,
    person_ids: Iterable[str],
    values: Optional[Mapping[str, Decimal]] = None,
) -> list[Split]:
    """
    Build splits for any split type.

    Args:
        split_type: Basis for the division
        total: Expense amount
        person_ids: People involved (duplicates collapsed, order kept)
        values: Percentages or exact amounts keyed by person id.
                Ignored for equal splits.
    """
    split_type = SplitType(split_type)
    values = values or {}

    if split_type == SplitType.EQUAL:
        return equal_splits(total, person_ids)
    elif split_type == SplitType.PERCENTAGE:
        return percentage_splits(total, person_ids, values)
    else:
        return exact_splits(person_ids, values)
