"""Unit tests for GetDashboardReport use case"""

import pytest
from datetime import datetime, timezone, timedelta
from decimal import Decimal

from src.app.use_cases.ledger.get_dashboard_report import GetDashboardReport
from src.app.use_cases.ledger.dtos import DashboardReportQueryDTO
from src.domain.report import ReportPeriod
from src.domain.transaction import Transaction, TransactionType, TransactionStatus, PaymentMethod

NOW = datetime(2024, 3, 15, 12, 0, 0)


def success(user_id: int, transaction_type: TransactionType, amount: str) -> Transaction:
    return Transaction(
        user_id=user_id,
        transaction_type=transaction_type,
        amount=Decimal(amount),
        status=TransactionStatus.SUCCESS,
        payment_method=PaymentMethod.BANK_TRANSFER,
        created_at=NOW - timedelta(days=1),
    )


@pytest.fixture
def report_use_case(mock_transaction_repo):
    return GetDashboardReport(mock_transaction_repo, clock=lambda: NOW)


class TestGetDashboardReport:
    """Test report aggregation"""

    @pytest.mark.asyncio
    async def test_monthly_totals_over_successful_transactions(
        self, report_use_case, mock_transaction_repo
    ):
        """TOP_UP 100 + PAYMENT 50 + WITHDRAWAL 25 gives net revenue 125"""
        # Arrange - repository only returns SUCCESS rows in range
        mock_transaction_repo.get_successful_in_range.return_value = [
            success(1, TransactionType.TOP_UP, "100.00"),
            success(2, TransactionType.PAYMENT, "50.00"),
            success(1, TransactionType.WITHDRAWAL, "25.00"),
        ]

        # Act
        result = await report_use_case.execute(DashboardReportQueryDTO(period=ReportPeriod.MONTHLY))

        # Assert
        assert result.is_ok()
        report = result.value
        assert report.total_top_up == Decimal("100.00")
        assert report.total_payments == Decimal("50.00")
        assert report.total_withdrawals == Decimal("25.00")
        assert report.transaction_count == 3
        assert report.net_revenue == Decimal("125.00")
        assert report.active_users_count == 2
        assert report.start_date == datetime(2024, 3, 1)
        assert report.end_date == NOW
        mock_transaction_repo.get_successful_in_range.assert_awaited_once_with(
            datetime(2024, 3, 1), NOW
        )

    @pytest.mark.asyncio
    async def test_empty_window_reports_zeroes(self, report_use_case):
        result = await report_use_case.execute(DashboardReportQueryDTO(period=ReportPeriod.DAILY))

        assert result.is_ok()
        assert result.value.transaction_count == 0
        assert result.value.net_revenue == Decimal("0.00")
        assert result.value.active_users_count == 0
        assert result.value.start_date == datetime(2024, 3, 15)

    @pytest.mark.asyncio
    async def test_start_after_end_is_invalid(self, report_use_case, mock_transaction_repo):
        query = DashboardReportQueryDTO(
            period=ReportPeriod.WEEKLY,
            start_date=datetime(2024, 3, 10),
            end_date=datetime(2024, 3, 1),
        )

        result = await report_use_case.execute(query)

        assert result.is_err()
        assert result.error.code == "INVALID_INPUT"
        mock_transaction_repo.get_successful_in_range.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lone_end_date_falls_back_to_period_window(
        self, report_use_case, mock_transaction_repo
    ):
        """A DAILY report with only an earlier end_date still covers today"""
        query = DashboardReportQueryDTO(
            period=ReportPeriod.DAILY,
            end_date=NOW - timedelta(days=2),
        )

        result = await report_use_case.execute(query)

        assert result.is_ok()
        assert result.value.start_date == datetime(2024, 3, 15)
        assert result.value.end_date == NOW
        mock_transaction_repo.get_successful_in_range.assert_awaited_once_with(
            datetime(2024, 3, 15), NOW
        )

    @pytest.mark.asyncio
    async def test_timezone_aware_bounds_are_normalised_to_utc(
        self, report_use_case, mock_transaction_repo
    ):
        jakarta = timezone(timedelta(hours=7))
        query = DashboardReportQueryDTO(
            period=ReportPeriod.DAILY,
            start_date=datetime(2024, 3, 10, 7, 0, tzinfo=jakarta),
            end_date=datetime(2024, 3, 12, 7, 0, tzinfo=jakarta),
        )

        result = await report_use_case.execute(query)

        assert result.is_ok()
        assert result.value.start_date == datetime(2024, 3, 10, 0, 0)
        assert result.value.start_date.tzinfo is None
        assert result.value.end_date == datetime(2024, 3, 12, 0, 0)
