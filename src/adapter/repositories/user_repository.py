"""SQLAlchemy implementation of UserRepository

Provides persistence for User entities. Balance writes are a conditional
UPDATE on the version column so that a stale read can never overwrite a
concurrent settlement, on engines with or without SELECT FOR UPDATE.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import update
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.errors import ConcurrencyConflict
from src.app.repositories.user_repository import UserRepository
from src.domain.user import User, AccountStatus


class SqlAlchemyUserRepository(UserRepository):
    """
    SQLAlchemy implementation of UserRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE (ignored by SQLite)
    - Optimistic compare-and-swap on balance writes (version column)
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int, for_update: bool = False) -> Optional[User]:
        """
        Retrieve user by ID with optional row-level locking

        Args:
            user_id: User ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            User if found, None otherwise
        """
        stmt = (
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        stmt = select(User).where(User.username == username)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

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
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def update(self, user: User) -> User:
        """
        Persist profile changes of an existing user

        Args:
            user: User entity with updated values

        Returns:
            Updated User
        """
        user.updated_at = datetime.utcnow()
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

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
        count_stmt = select(func.count()).select_from(User)
        stmt = select(User)

        if account_status:
            count_stmt = count_stmt.where(User.account_status == account_status)
            stmt = stmt.where(User.account_status == account_status)

        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar()

        stmt = stmt.order_by(User.id.asc()).limit(limit).offset(offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_all(self) -> List[User]:
        stmt = select(User).order_by(User.id.asc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def apply_balance_delta(
        self, user_id: int, delta: Decimal, expected_version: int
    ) -> User:
        """
        Add delta to the balance if the row is unchanged since it was read

        Args:
            user_id: User ID
            delta: Signed amount to add
            expected_version: Version observed when the balance was read

        Returns:
            Updated User

        Raises:
            ConcurrencyConflict: If the version moved or the result would be negative
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .where(User.version == expected_version)
            .where(User.balance + delta >= 0)
            .values(
                balance=User.balance + delta,
                version=User.version + 1,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)

        if result.rowcount != 1:
            raise ConcurrencyConflict(
                "user", user_id, f"expected version {expected_version}"
            )

        user = await self.get_by_id(user_id)
        if user is None:
            raise ConcurrencyConflict("user", user_id, "row disappeared")
        return user
