"""Data Transfer Objects for Account Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from src.domain.user import User, UserRole, AccountStatus

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class CreateUserCommandDTO(BaseModel):
    """
    Command DTO for onboarding a user

    Used as input to CreateUser use case.
    """

    username: str = Field(..., min_length=3, max_length=50, description="Unique username")
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN, description="Unique email address")
    full_name: str = Field(..., min_length=1, max_length=100, description="Full name")
    phone_number: str = Field(..., min_length=10, max_length=15, description="Phone number")
    role: UserRole = Field(default=UserRole.USER, description="User role")
    opening_balance: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        max_digits=15,
        decimal_places=2,
        description="Initial balance (must be >= 0)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "username": "johndoe",
                "email": "john@example.com",
                "full_name": "John Doe",
                "phone_number": "081234567890",
                "role": "USER",
                "opening_balance": "0.00"
            }
        }


class UpdateUserCommandDTO(BaseModel):
    """
    Command DTO for partial profile updates

    Every field is optional. A field is applied only when it was explicitly
    provided; omitted fields are left untouched (see changes()).
    Balance is not updatable here.
    """

    username: Optional[str] = Field(default=None, min_length=3, max_length=50)
    email: Optional[str] = Field(default=None, max_length=255, pattern=EMAIL_PATTERN)
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(default=None, min_length=10, max_length=15)
    account_status: Optional[AccountStatus] = None

    def changes(self) -> Dict[str, Any]:
        """Fields explicitly provided with a non-null value"""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }


class UserResponseDTO(BaseModel):
    """Response DTO for a user"""

    id: int
    username: str
    email: str
    full_name: str
    phone_number: str
    role: UserRole
    account_status: AccountStatus
    balance: Decimal
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserResponseDTO":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            phone_number=user.phone_number,
            role=user.role,
            account_status=user.account_status,
            balance=user.balance,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class ListUsersResponseDTO(BaseModel):
    """Paginated user list"""

    users: List[UserResponseDTO]
    total: int
    limit: int
    offset: int
