"""Ledger use cases"""
from .create_transaction import CreateTransaction
from .settle_transaction import SettleTransaction
from .get_transaction import GetTransaction
from .list_transactions import ListTransactions
from .get_dashboard_report import GetDashboardReport
from .reconcile_balances import ReconcileBalances
from .dtos import (
    CreateTransactionCommandDTO,
    SettleTransactionCommandDTO,
    TransactionResponseDTO,
    SettlementResponseDTO,
    ListTransactionsQueryDTO,
    ListTransactionsResponseDTO,
    DashboardReportQueryDTO,
    DashboardReportDTO,
    BalanceDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "CreateTransaction",
    "SettleTransaction",
    "GetTransaction",
    "ListTransactions",
    "GetDashboardReport",
    "ReconcileBalances",
    "CreateTransactionCommandDTO",
    "SettleTransactionCommandDTO",
    "TransactionResponseDTO",
    "SettlementResponseDTO",
    "ListTransactionsQueryDTO",
    "ListTransactionsResponseDTO",
    "DashboardReportQueryDTO",
    "DashboardReportDTO",
    "BalanceDiscrepancyDTO",
    "ReconciliationResultDTO",
]
