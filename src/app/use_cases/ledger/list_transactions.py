"""
List Transactions Use Case

Retrieves transaction history with optional type/status/user filters and
pagination.
"""
from libs.result import Result, Return
from src.app.repositories.transaction_repository import TransactionRepository
from .dtos import ListTransactionsQueryDTO, ListTransactionsResponseDTO, TransactionResponseDTO


class ListTransactions:
    """
    Use case: View transactions

    Transactions are ordered by created_at DESC (most recent first).
    Pure delegation to the repository.
    """

    def __init__(self, transaction_repo: TransactionRepository):
        """
        Initialize with transaction repository.

        Args:
            transaction_repo: TransactionRepository instance
        """
        self.transaction_repo = transaction_repo

    async def execute(self, query: ListTransactionsQueryDTO) -> Result[ListTransactionsResponseDTO]:
        """
        List transactions with filters and pagination.

        Args:
            query: ListTransactionsQueryDTO (type, status, user_id, limit, offset)

        Returns:
            Result[ListTransactionsResponseDTO]: Paginated transaction list
        """
        transactions, total = await self.transaction_repo.list(
            transaction_type=query.transaction_type,
            status=query.status,
            user_id=query.user_id,
            limit=query.limit,
            offset=query.offset,
        )

        return Return.ok(
            ListTransactionsResponseDTO(
                transactions=[TransactionResponseDTO.from_entity(txn) for txn in transactions],
                total=total,
                limit=query.limit,
                offset=query.offset,
            )
        )
