"""Expense validation package."""

from splitledger.validation.validator import ExpenseRejectedError, ExpenseValidator

__all__ = ["ExpenseRejectedError", "ExpenseValidator"]
