"""Transaction Repository Interface

Defines the contract for ledger (transaction) persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from src.domain.transaction import Transaction, TransactionStatus, TransactionType


class TransactionRepository(ABC):
    """
    Repository interface for Transaction persistence

    Transactions are never deleted. The only mutation is the guarded
    status transition performed by compare_and_set_status.
    """

    @abstractmethod
    async def create(self, transaction: Transaction) -> Transaction:
        """
        Insert a new transaction

        Args:
            transaction: Transaction entity to persist

        Returns:
            Created Transaction with generated ID
        """
        pass

    @abstractmethod
    async def get_by_id(self, transaction_id: int, for_update: bool = False) -> Optional[Transaction]:
        """
        Retrieve transaction by ID

        Args:
            transaction_id: Transaction ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Transaction if found, None otherwise
        """
        pass

    @abstractmethod
    async def compare_and_set_status(
        self,
        transaction_id: int,
        expected: TransactionStatus,
        new_status: TransactionStatus,
    ) -> Optional[Transaction]:
        """
        Conditionally transition a transaction's status

        The update only applies while the stored status equals expected.
        updated_at is set to now on success.

        Args:
            transaction_id: Transaction ID
            expected: Status the row must currently have (PENDING)
            new_status: Terminal status to set

        Returns:
            Updated Transaction, or None if the row was not in the expected status
        """
        pass

    @abstractmethod
    async def list(
        self,
        transaction_type: Optional[TransactionType] = None,
        status: Optional[TransactionStatus] = None,
        user_id: Optional[int] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[List[Transaction], int]:
        """
        Retrieve transactions with optional filters, most recent first

        Returns:
            Tuple of (list of Transaction, total count matching the filters)
        """
        pass

    @abstractmethod
    async def get_successful_in_range(
        self, start: datetime, end: datetime
    ) -> List[Transaction]:
        """
        Retrieve SUCCESS transactions created within [start, end]

        Used by the dashboard report.
        """
        pass

    @abstractmethod
    async def get_by_reference_id(
        self, user_id: int, reference_id: str
    ) -> List[Transaction]:
        """
        Retrieve a user's transactions carrying the given reference_id
        """
        pass

    @abstractmethod
    async def get_successful_delta_sum_by_user(self, user_id: int) -> Decimal:
        """
        Sum of balance deltas of a user's SUCCESS transactions

        TOP_UP counts positive, PAYMENT and WITHDRAWAL negative.
        Used by balance reconciliation.
        """
        pass
