"""
Balance Engine

DESIGN DECISION: Balances are DERIVED, never stored.
Every read recomputes them from the full expense list, so they can never
drift out of sync with the ledger. Both functions here are pure: same
inputs, same outputs, no state.

Accounting rule per expense:
- the payer is credited the full amount they fronted
- every split participant is debited their split amount

Hence sum(balances) == sum(expense.amount - expense.split_total).
For fully split expenses that is zero (conservation). The engine does
not enforce conservation on input; it only preserves it.
"""

from decimal import Decimal
from typing import Iterable, Mapping, Sequence

from splitledger.models.ledger import Balance, Expense, Person, Transfer

DEFAULT_EPSILON = Decimal("0.005")


def compute_balances(
    people: Iterable[Person],
    expenses: Iterable[Expense],
) -> list[Balance]:
    """
    Compute each person's net balance over the ledger.

    One Balance is emitted for every person id ever touched: everyone in
    the roster (even with no expenses), plus any id that appears as a payer
    or split participant but is no longer in the roster. Roster ids come
    first in roster order, then orphaned ids in first-seen order.

    Whether to show orphaned ids to users is up to the caller.
    """
    totals: dict[str, Decimal] = {}
    for person in people:
        totals.setdefault(person.id, Decimal(0))

    for expense in expenses:
        totals[expense.paid_by_id] = (
            totals.get(expense.paid_by_id, Decimal(0)) + expense.amount
        )
        for split in expense.splits:
            totals[split.person_id] = (
                totals.get(split.person_id, Decimal(0)) - split.amount
            )

    return [Balance(person_id=pid, amount=amount) for pid, amount in totals.items()]


def balance_map(balances: Iterable[Balance]) -> dict[str, Decimal]:
    """Index balances by person id."""
    return {b.person_id: b.amount for b in balances}


def total_unallocated(expenses: Iterable[Expense]) -> Decimal:
    """What sum(balances) must equal for this ledger."""
    return sum((e.unallocated for e in expenses), Decimal(0))


def is_conserved(
    balances: Iterable[Balance],
    epsilon: Decimal = DEFAULT_EPSILON,
) -> bool:
    """True when the balances sum to zero within epsilon."""
    return abs(sum((b.amount for b in balances), Decimal(0))) <= epsilon


def _pick_largest(parties: Mapping[str, Decimal]) -> str:
    # largest magnitude first; equal magnitudes broken by id ascending
    return min(parties, key=lambda pid: (-abs(parties[pid]), pid))


def compute_settlement_plan(
    balances: Sequence[Balance],
    epsilon: Decimal = DEFAULT_EPSILON,
) -> list[Transfer]:
    """
    Reduce balances to a short list of settle-up transfers.

    Greedy: repeatedly match the largest creditor with the largest debtor,
    transfer min(credit, debt), and drop whoever reaches zero (within
    epsilon). Ties on magnitude go to the smaller person id, so the output
    is deterministic.

    Greedy matching produces at most (creditors + debtors - 1) transfers
    but is not guaranteed to find the fewest possible transfers in general.

    If the balances don't sum to zero, the leftover stays unsettled.
    """
    creditors: dict[str, Decimal] = {}
    debtors: dict[str, Decimal] = {}
    for balance in balances:
        if balance.amount > epsilon:
            creditors[balance.person_id] = creditors.get(balance.person_id, Decimal(0)) + balance.amount
        elif balance.amount < -epsilon:
            debtors[balance.person_id] = debtors.get(balance.person_id, Decimal(0)) + balance.amount

    plan: list[Transfer] = []
    while creditors and debtors:
        creditor = _pick_largest(creditors)
        debtor = _pick_largest(debtors)
        amount = min(creditors[creditor], -debtors[debtor])

        plan.append(Transfer(
            from_person_id=debtor,
            to_person_id=creditor,
            amount=amount,
        ))

        creditors[creditor] -= amount
        debtors[debtor] += amount
        if creditors[creditor] <= epsilon:
            del creditors[creditor]
        if debtors[debtor] >= -epsilon:
            del debtors[debtor]

    return plan
