"""Withdrawal request workflow."""

from .workflow import WithdrawalWorkflow

__all__ = ["WithdrawalWorkflow"]
