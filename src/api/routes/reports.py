"""Report API Routes"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.use_cases.ledger import (
    GetDashboardReport,
    DashboardReportQueryDTO,
    DashboardReportDTO,
)
from src.adapter.repositories.transaction_repository import SqlAlchemyTransactionRepository
from src.domain.report import ReportPeriod
from src.depends import get_session
from src.api.error import raise_for_error

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get(
    "/dashboard",
    response_model=DashboardReportDTO,
    status_code=status.HTTP_200_OK,
    responses={400: {"description": "start_date is after end_date"}}
)
async def get_dashboard_report(
    period: ReportPeriod = Query(...),
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
    session: AsyncSession = Depends(get_session)
):
    """
    Summarise successful transactions for a period.

    **Query parameters:**
    - `period` (required): DAILY (since midnight UTC), WEEKLY (last 7 days)
      or MONTHLY (since the 1st of the month)
    - `start_date` / `end_date` (optional): replace the period window when both are given

    **Returns:**
    - 200: Totals per type, net revenue and active user count
    - 400: Resolved start is after end
    """
    transaction_repo = SqlAlchemyTransactionRepository(session)

    query = DashboardReportQueryDTO(period=period, start_date=start_date, end_date=end_date)
    result = await GetDashboardReport(transaction_repo).execute(query)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
