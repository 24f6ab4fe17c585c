"""User Domain Entity

Account holder with a monetary balance. The balance is mutated only by
settling transactions and is never negative.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from pydantic import NaiveDatetime
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, BigInteger, DateTime, Integer, Numeric, String
from src.domain.base import BaseModel


class UserRole(str, Enum):
    """User roles"""
    USER = "USER"
    ADMIN = "ADMIN"


class AccountStatus(str, Enum):
    """Account status types"""
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    BLOCKED = "BLOCKED"


class User(BaseModel, table=True):
    """
    User - Account holder and balance owner

    Domain Rules:
    - username and email are unique
    - Balance must be non-negative
    - Balance changes only when one of the user's transactions settles to SUCCESS
    - version is bumped on every balance write (compare-and-swap token)
    - opening_balance is fixed at onboarding and used for reconciliation
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint('balance >= 0', name='user_balance_non_negative'),
        CheckConstraint('opening_balance >= 0', name='user_opening_balance_non_negative'),
    )

    id: int = Field(
        sa_column=Column(
            BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
        ),
        description="Unique user identifier (auto-increment)"
    )

    username: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True, index=True),
        description="Unique username"
    )

    email: str = Field(
        sa_column=Column(String(255), nullable=False, unique=True, index=True),
        description="Unique email address"
    )

    full_name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Full name"
    )

    phone_number: str = Field(
        sa_column=Column(String(15), nullable=False),
        description="Phone number"
    )

    role: UserRole = Field(
        default=UserRole.USER,
        description="User role (USER, ADMIN)"
    )

    account_status: AccountStatus = Field(
        default=AccountStatus.ACTIVE,
        description="Account status (ACTIVE, SUSPENDED, BLOCKED)"
    )

    balance: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(15, 2), nullable=False, default=0),
        description="Current balance (must be >= 0, precision: 15,2)"
    )

    opening_balance: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(15, 2), nullable=False, default=0),
        description="Balance at onboarding (immutable)"
    )

    version: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False, default=1),
        description="Optimistic concurrency token, incremented on balance writes"
    )

    created_at: NaiveDatetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
        description="User creation timestamp (UTC)"
    )

    updated_at: NaiveDatetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
        description="Last update timestamp (UTC)"
    )

    def is_active(self) -> bool:
        return self.account_status == AccountStatus.ACTIVE

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "username": "johndoe",
                "email": "john@example.com",
                "full_name": "John Doe",
                "phone_number": "081234567890",
                "role": "USER",
                "account_status": "ACTIVE",
                "balance": "1000.00",
                "opening_balance": "0.00",
                "version": 3,
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }
