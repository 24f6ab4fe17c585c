from .base import BaseModel
from .user import User, UserRole, AccountStatus
from .transaction import (
    Transaction,
    TransactionType,
    TransactionStatus,
    PaymentMethod,
    TERMINAL_STATUSES,
    DEBIT_TYPES,
)
from .report import ReportPeriod, resolve_report_window

__all__ = [
    "BaseModel",
    "User",
    "UserRole",
    "AccountStatus",
    "Transaction",
    "TransactionType",
    "TransactionStatus",
    "PaymentMethod",
    "TERMINAL_STATUSES",
    "DEBIT_TYPES",
    "ReportPeriod",
    "resolve_report_window",
]
