"""Balance computation and split construction."""

from splitledger.balances.engine import (
    DEFAULT_EPSILON,
    balance_map,
    compute_balances,
    compute_settlement_plan,
    is_conserved,
    total_unallocated,
)
from splitledger.balances.splits import (
    build_splits,
    equal_splits,
    exact_splits,
    percentage_splits,
)

__all__ = [
    "DEFAULT_EPSILON",
    "balance_map",
    "compute_balances",
    "compute_settlement_plan",
    "is_conserved",
    "total_unallocated",
    "build_splits",
    "equal_splits",
    "exact_splits",
    "percentage_splits",
]
