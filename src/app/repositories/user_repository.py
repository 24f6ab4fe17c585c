"""User Repository Interface

Defines the contract for the account store (users and balances).
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional
from src.domain.user import User, AccountStatus


class UserRepository(ABC):
    """
    Repository interface for User persistence

    Balance writes go exclusively through apply_balance_delta, which is a
    compare-and-swap on the user's version. Reads may take a row lock
    (SELECT FOR UPDATE) for the duration of the current transaction.
    """

    @abstractmethod
    async def get_by_id(self, user_id: int, for_update: bool = False) -> Optional[User]:
        """
        Retrieve user by ID

        Args:
            user_id: User ID
            for_update: If True, lock the row with SELECT FOR UPDATE (pessimistic lock)

        Returns:
            User if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """
        Create a new user

        Args:
            user: User entity to persist

        Returns:
            Created User with generated ID

        Raises:
            IntegrityError: If username or email already exists
        """
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """
        Persist profile changes of an existing user

        Balance fields are not written by this method.

        Args:
            user: User entity with updated values

        Returns:
            Updated User
        """
        pass

    @abstractmethod
    async def list(
        self,
        account_status: Optional[AccountStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[List[User], int]:
        """
        Retrieve users with optional status filter and pagination

        Returns:
            Tuple of (list of User, total count)
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[User]:
        """
        Retrieve all users

        Used by balance reconciliation.
        """
        pass

    @abstractmethod
    async def apply_balance_delta(
        self, user_id: int, delta: Decimal, expected_version: int
    ) -> User:
        """
        Atomically add delta to the user's balance

        The write only happens if the stored version still equals
        expected_version and the resulting balance is non-negative.

        Args:
            user_id: User ID
            delta: Signed amount to add
            expected_version: Version observed when the balance was read

        Returns:
            Updated User

        Raises:
            ConcurrencyConflict: If the row changed since it was read
        """
        pass
