"""Data Transfer Objects for Ledger Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from src.domain.transaction import (
    Transaction,
    TransactionType,
    TransactionStatus,
    PaymentMethod,
)
from src.domain.report import ReportPeriod


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalise timezone-aware datetimes to naive UTC (storage convention)"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class CreateTransactionCommandDTO(BaseModel):
    """
    Command DTO for creating a transaction

    Used as input to CreateTransaction use case.
    """

    user_id: int = Field(
        ...,
        gt=0,
        description="Owning user ID"
    )

    transaction_type: TransactionType = Field(
        ...,
        description="Type of transaction (TOP_UP, PAYMENT, WITHDRAWAL)"
    )

    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=15,
        decimal_places=2,
        description="Transaction amount (must be > 0, at most 2 decimal places)"
    )

    payment_method: PaymentMethod = Field(
        ...,
        description="Payment method (DANA, BANK_TRANSFER, CREDIT_CARD)"
    )

    description: Optional[str] = Field(
        default=None,
        description="Free-form description"
    )

    reference_id: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Caller-supplied correlation token"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": 1,
                "transaction_type": "PAYMENT",
                "amount": "150.00",
                "payment_method": "DANA",
                "description": "Order #1234",
                "reference_id": "order_1234"
            }
        }


class SettleTransactionCommandDTO(BaseModel):
    """
    Command DTO for settling a PENDING transaction

    Used as input to SettleTransaction use case.
    """

    transaction_id: int = Field(
        ...,
        description="Transaction ID"
    )

    status: TransactionStatus = Field(
        ...,
        description="Terminal status to settle into (SUCCESS, FAILED, CANCELLED)"
    )


class TransactionResponseDTO(BaseModel):
    """
    Response DTO for a single transaction

    Returned by CreateTransaction, GetTransaction and ListTransactions.
    """

    id: int = Field(..., description="Transaction ID")
    user_id: int = Field(..., description="Owning user ID")
    transaction_type: TransactionType = Field(..., description="Type of transaction")
    amount: Decimal = Field(..., description="Transaction amount")
    status: TransactionStatus = Field(..., description="Settlement status")
    payment_method: PaymentMethod = Field(..., description="Payment method")
    description: Optional[str] = Field(default=None, description="Description")
    reference_id: Optional[str] = Field(default=None, description="Correlation token")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    updated_at: datetime = Field(..., description="Last status change timestamp (UTC)")

    @classmethod
    def from_entity(cls, transaction: Transaction) -> "TransactionResponseDTO":
        return cls(
            id=transaction.id,
            user_id=transaction.user_id,
            transaction_type=transaction.transaction_type,
            amount=transaction.amount,
            status=transaction.status,
            payment_method=transaction.payment_method,
            description=transaction.description,
            reference_id=transaction.reference_id,
            created_at=transaction.created_at,
            updated_at=transaction.updated_at,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "id": 42,
                "user_id": 1,
                "transaction_type": "PAYMENT",
                "amount": "150.00",
                "status": "PENDING",
                "payment_method": "DANA",
                "description": "Order #1234",
                "reference_id": "order_1234",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }


class SettlementResponseDTO(BaseModel):
    """
    Response DTO for a settlement

    Carries the settled transaction plus the owner's balance snapshots.
    balance_before equals balance_after when no money moved.
    """

    transaction: TransactionResponseDTO = Field(..., description="Settled transaction")
    balance_before: Decimal = Field(..., description="Owner balance before settlement")
    balance_after: Decimal = Field(..., description="Owner balance after settlement")
    balance_delta: Decimal = Field(..., description="Signed amount applied to the balance")

    class Config:
        json_schema_extra = {
            "example": {
                "transaction": {"id": 42, "user_id": 1, "status": "SUCCESS", "amount": "150.00"},
                "balance_before": "1000.00",
                "balance_after": "850.00",
                "balance_delta": "-150.00"
            }
        }


class ListTransactionsQueryDTO(BaseModel):
    """Query DTO for ListTransactions (all filters optional)"""

    transaction_type: Optional[TransactionType] = None
    status: Optional[TransactionStatus] = None
    user_id: Optional[int] = None
    limit: int = Field(default=50, gt=0, le=200)
    offset: int = Field(default=0, ge=0)


class ListTransactionsResponseDTO(BaseModel):
    """Paginated transaction list"""

    transactions: List[TransactionResponseDTO] = Field(..., description="Page of transactions")
    total: int = Field(..., description="Total transactions matching the filters")
    limit: int = Field(..., description="Page size")
    offset: int = Field(..., description="Page offset")


class DashboardReportQueryDTO(BaseModel):
    """
    Query DTO for the dashboard report

    Explicit start_date and end_date replace the period window only when both are given.
    """

    period: ReportPeriod = Field(..., description="Report period (DAILY, WEEKLY, MONTHLY)")
    start_date: Optional[datetime] = Field(default=None, description="Explicit window start")
    end_date: Optional[datetime] = Field(default=None, description="Explicit window end")

    @field_validator("start_date", "end_date")
    @classmethod
    def normalise_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class DashboardReportDTO(BaseModel):
    """Financial summary over successful transactions in a window"""

    total_top_up: Decimal = Field(..., description="Sum of successful TOP_UP amounts")
    total_payments: Decimal = Field(..., description="Sum of successful PAYMENT amounts")
    total_withdrawals: Decimal = Field(..., description="Sum of successful WITHDRAWAL amounts")
    transaction_count: int = Field(..., description="Number of successful transactions")
    net_revenue: Decimal = Field(..., description="top ups + payments - withdrawals")
    active_users_count: int = Field(..., description="Distinct users with a successful transaction")
    period: ReportPeriod = Field(..., description="Requested period")
    start_date: datetime = Field(..., description="Resolved window start (UTC)")
    end_date: datetime = Field(..., description="Resolved window end (UTC)")

    class Config:
        json_schema_extra = {
            "example": {
                "total_top_up": "100.00",
                "total_payments": "50.00",
                "total_withdrawals": "25.00",
                "transaction_count": 3,
                "net_revenue": "125.00",
                "active_users_count": 2,
                "period": "MONTHLY",
                "start_date": "2024-01-01T00:00:00",
                "end_date": "2024-01-15T12:00:00"
            }
        }


class BalanceDiscrepancyDTO(BaseModel):
    """A user whose balance disagrees with its settled transactions"""

    user_id: int
    username: str
    balance: Decimal = Field(..., description="Stored balance")
    expected_balance: Decimal = Field(..., description="opening_balance + sum of SUCCESS deltas")
    discrepancy: Decimal = Field(..., description="balance - expected_balance")


class ReconciliationResultDTO(BaseModel):
    """Outcome of one reconciliation run"""

    total_users_checked: int
    discrepancies_found: int
    discrepancies: List[BalanceDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int
