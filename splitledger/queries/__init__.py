"""Deterministic read-only reports over the ledger."""

from splitledger.queries.reports import BalanceReporter

__all__ = ["BalanceReporter"]
