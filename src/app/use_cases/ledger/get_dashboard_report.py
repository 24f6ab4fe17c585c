"""GetDashboardReport Use Case

Summarises successful transactions within a report window.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional
from libs.result import Result, Return, Error
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.report import resolve_report_window
from src.domain.transaction import TransactionType
from .dtos import DashboardReportQueryDTO, DashboardReportDTO

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class GetDashboardReport:
    """
    Use Case: Dashboard financial report

    Read-only. Scans SUCCESS transactions created within [start, end] and
    aggregates them by type. Takes no locks, so a settlement committing at
    the same instant may or may not be included.

    net_revenue = total_top_up + total_payments - total_withdrawals
    active_users_count = distinct user_id among the scanned transactions
    """

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.transaction_repo = transaction_repo
        self.clock = clock or datetime.utcnow

    async def execute(self, query: DashboardReportQueryDTO) -> Result[DashboardReportDTO]:
        """
        Build the dashboard report

        Args:
            query: DashboardReportQueryDTO with period and optional explicit bounds

        Returns:
            Result[DashboardReportDTO]: Aggregated report or error

        Errors:
            INVALID_INPUT: Resolved start is after end
        """
        start, end = resolve_report_window(
            query.period, self.clock(), query.start_date, query.end_date
        )

        if start > end:
            return Return.err(
                Error(
                    code="INVALID_INPUT",
                    message="Report window start must not be after its end",
                    reason=f"start={start.isoformat()}, end={end.isoformat()}",
                )
            )

        transactions = await self.transaction_repo.get_successful_in_range(start, end)

        totals = {transaction_type: ZERO for transaction_type in TransactionType}
        users = set()
        for txn in transactions:
            totals[txn.transaction_type] += txn.amount
            users.add(txn.user_id)

        total_top_up = totals[TransactionType.TOP_UP]
        total_payments = totals[TransactionType.PAYMENT]
        total_withdrawals = totals[TransactionType.WITHDRAWAL]

        report = DashboardReportDTO(
            total_top_up=total_top_up,
            total_payments=total_payments,
            total_withdrawals=total_withdrawals,
            transaction_count=len(transactions),
            net_revenue=total_top_up + total_payments - total_withdrawals,
            active_users_count=len(users),
            period=query.period,
            start_date=start,
            end_date=end,
        )

        logger.info(
            f"Dashboard report {query.period.value} [{start.isoformat()} .. {end.isoformat()}]: "
            f"{report.transaction_count} transactions, {report.active_users_count} active users"
        )
        return Return.ok(report)
