"""SQLAlchemy implementation of TransactionRepository

Provides persistence for Transaction entities. The status transition is a
conditional UPDATE guarded by the expected status, so of two concurrent
settlements of the same transaction only one can match the row.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import case, update
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.transaction import Transaction, TransactionStatus, TransactionType


class SqlAlchemyTransactionRepository(TransactionRepository):
    """
    SQLAlchemy implementation of TransactionRepository

    Features:
    - Guarded status transition (UPDATE ... WHERE status = expected)
    - Filtered, paginated listing
    - Range scans for reporting
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: Transaction) -> Transaction:
        """
        Insert a new transaction

        Args:
            transaction: Transaction entity to persist

        Returns:
            Created Transaction with generated ID
        """
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_id(self, transaction_id: int, for_update: bool = False) -> Optional[Transaction]:
        """
        Retrieve transaction by ID with optional row-level locking

        Args:
            transaction_id: Transaction ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Transaction if found, None otherwise
        """
        stmt = (
            select(Transaction)
            .where(Transaction.id == transaction_id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def compare_and_set_status(
        self,
        transaction_id: int,
        expected: TransactionStatus,
        new_status: TransactionStatus,
    ) -> Optional[Transaction]:
        """
        Transition status only while the row still has the expected status

        Args:
            transaction_id: Transaction ID
            expected: Status the row must currently have
            new_status: Status to set

        Returns:
            Updated Transaction, or None if no row matched
        """
        stmt = (
            update(Transaction)
            .where(Transaction.id == transaction_id)
            .where(Transaction.status == expected)
            .values(status=new_status, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)

        if result.rowcount != 1:
            return None

        return await self.get_by_id(transaction_id)

    async def list(
        self,
        transaction_type: Optional[TransactionType] = None,
        status: Optional[TransactionStatus] = None,
        user_id: Optional[int] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[List[Transaction], int]:
        """
        Retrieve transactions with optional filters, ordered by created_at DESC

        Returns:
            Tuple of (list of Transaction, total count)
        """
        conditions = []
        if transaction_type is not None:
            conditions.append(Transaction.transaction_type == transaction_type)
        if status is not None:
            conditions.append(Transaction.status == status)
        if user_id is not None:
            conditions.append(Transaction.user_id == user_id)

        count_stmt = select(func.count()).select_from(Transaction).where(*conditions)
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar()

        stmt = (
            select(Transaction)
            .where(*conditions)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_successful_in_range(
        self, start: datetime, end: datetime
    ) -> List[Transaction]:
        """
        Retrieve SUCCESS transactions with created_at in [start, end]
        """
        stmt = (
            select(Transaction)
            .where(Transaction.status == TransactionStatus.SUCCESS)
            .where(Transaction.created_at >= start)
            .where(Transaction.created_at <= end)
            .order_by(Transaction.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_reference_id(
        self, user_id: int, reference_id: str
    ) -> List[Transaction]:
        stmt = (
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .where(Transaction.reference_id == reference_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_successful_delta_sum_by_user(self, user_id: int) -> Decimal:
        """
        Sum of signed balance deltas over a user's SUCCESS transactions
        """
        signed_amount = case(
            (Transaction.transaction_type == TransactionType.TOP_UP, Transaction.amount),
            else_=-Transaction.amount,
        )
        stmt = (
            select(func.coalesce(func.sum(signed_amount), 0))
            .where(Transaction.user_id == user_id)
            .where(Transaction.status == TransactionStatus.SUCCESS)
        )
        result = await self.session.execute(stmt)
        total = result.scalar_one()
        return Decimal(str(total)).quantize(Decimal("0.01"))
