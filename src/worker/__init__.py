"""Background workers for the ledger service"""
from .balance_reconciler import BalanceReconcilerWorker

__all__ = ["BalanceReconcilerWorker"]
