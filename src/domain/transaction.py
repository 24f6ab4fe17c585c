"""Transaction Domain Entity

Ledger record of a top-up, payment or withdrawal. Created PENDING and
settled exactly once into a terminal status.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import NaiveDatetime
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, ForeignKey, BigInteger, DateTime, Integer, Numeric, String, Text
from src.domain.base import BaseModel


class TransactionType(str, Enum):
    """Transaction types"""
    TOP_UP = "TOP_UP"          # Funds added to the balance
    PAYMENT = "PAYMENT"        # Funds spent from the balance
    WITHDRAWAL = "WITHDRAWAL"  # Funds paid out from the balance


class TransactionStatus(str, Enum):
    """Transaction status types (PENDING is the only non-terminal status)"""
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self is not TransactionStatus.PENDING


class PaymentMethod(str, Enum):
    """Payment methods (descriptive only)"""
    DANA = "DANA"
    BANK_TRANSFER = "BANK_TRANSFER"
    CREDIT_CARD = "CREDIT_CARD"


TERMINAL_STATUSES = frozenset(
    {TransactionStatus.SUCCESS, TransactionStatus.FAILED, TransactionStatus.CANCELLED}
)

DEBIT_TYPES = frozenset({TransactionType.PAYMENT, TransactionType.WITHDRAWAL})


class Transaction(BaseModel, table=True):
    """
    Transaction - Ledger entry owned by a user

    Domain Rules:
    - amount > 0, transaction_type never changes
    - Created PENDING; transitions exactly once to SUCCESS, FAILED or CANCELLED
    - Balance effect is applied only when the transaction becomes SUCCESS:
      TOP_UP credits the amount, PAYMENT and WITHDRAWAL debit it
    - updated_at changes exactly on the status transition
    - reference_id is a caller-supplied correlation token (not unique)
    """

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint('amount > 0', name='transaction_amount_positive'),
        Index('ix_transactions_created_at', 'created_at'),
        Index('ix_transactions_status_created_at', 'status', 'created_at'),
        Index('ix_transactions_user_reference', 'user_id', 'reference_id'),
    )

    id: int = Field(
        sa_column=Column(
            BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
        ),
        description="Unique transaction identifier (auto-increment)"
    )

    user_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("users.id"), nullable=False, index=True),
        description="Foreign key to the owning User"
    )

    transaction_type: TransactionType = Field(
        description="Type of transaction (TOP_UP, PAYMENT, WITHDRAWAL)"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(15, 2), nullable=False),
        description="Transaction amount (must be > 0, precision: 15,2)"
    )

    status: TransactionStatus = Field(
        default=TransactionStatus.PENDING,
        description="Settlement status"
    )

    payment_method: PaymentMethod = Field(
        description="Payment method (DANA, BANK_TRANSFER, CREDIT_CARD)"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Free-form description"
    )

    reference_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Caller-supplied correlation token"
    )

    created_at: NaiveDatetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
        description="Creation timestamp (UTC)"
    )

    updated_at: NaiveDatetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
        description="Last status change timestamp (UTC)"
    )

    def is_pending(self) -> bool:
        return self.status == TransactionStatus.PENDING

    def balance_delta(self, new_status: TransactionStatus) -> Decimal:
        """
        Signed balance change caused by settling into new_status

        Only SUCCESS moves money; FAILED and CANCELLED leave the balance as is.
        """
        if new_status != TransactionStatus.SUCCESS:
            return Decimal("0")
        if self.transaction_type == TransactionType.TOP_UP:
            return self.amount
        return -self.amount

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
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
