"""Request schemas for Ledger API

Pydantic models for validating incoming HTTP requests.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from src.domain.transaction import TransactionType, TransactionStatus, PaymentMethod
from src.domain.user import UserRole, AccountStatus
from src.app.use_cases.accounts.dtos import EMAIL_PATTERN


class CreateTransactionRequestSchema(BaseModel):
    """
    Request schema for creating a transaction

    Used for POST /transactions endpoint.
    """

    user_id: int = Field(..., gt=0, description="Owning user ID")

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

    description: Optional[str] = Field(default=None, max_length=1000)

    reference_id: Optional[str] = Field(default=None, min_length=1, max_length=255)

    @field_validator("reference_id")
    @classmethod
    def strip_reference_id(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return value.strip() or None


class SettleTransactionRequestSchema(BaseModel):
    """
    Request schema for settling a transaction

    Used for POST /transactions/{transaction_id}/settle endpoint.
    """

    status: TransactionStatus = Field(
        ...,
        description="Terminal status (SUCCESS, FAILED, CANCELLED)"
    )


class CreateUserRequestSchema(BaseModel):
    """
    Request schema for onboarding a user

    Used for POST /users endpoint.
    """

    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    full_name: str = Field(..., min_length=1, max_length=100)
    phone_number: str = Field(..., min_length=10, max_length=15)
    role: UserRole = Field(default=UserRole.USER)
    opening_balance: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        max_digits=15,
        decimal_places=2,
        description="Initial balance (must be >= 0)"
    )


class UpdateUserRequestSchema(BaseModel):
    """
    Request schema for partial profile updates

    Used for PATCH /users/{user_id} endpoint. Omitted fields are left unchanged.
    """

    username: Optional[str] = Field(default=None, min_length=3, max_length=50)
    email: Optional[str] = Field(default=None, max_length=255, pattern=EMAIL_PATTERN)
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(default=None, min_length=10, max_length=15)
    account_status: Optional[AccountStatus] = None
