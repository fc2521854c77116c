"""
SplitLedger - Source Package

Shared-expense tracking core: record who paid for what and how it is
split, derive everyone's net balance, and plan the transfers that settle
them up.

DESIGN PRINCIPLES:
1. Balances are derived, never stored
2. The in-memory ledger is the source of truth for a session
3. Persistence failures are logged, never fatal
4. The core is permissive; validation is a separate, explicit layer
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "SplitLedger Team"
