"""Get Transaction Use Case

Retrieves a single transaction by ID.
"""

from libs.result import Result, Return, Error
from src.app.repositories.transaction_repository import TransactionRepository
from .dtos import TransactionResponseDTO


class GetTransaction:
    """Read-only lookup of one transaction"""

    def __init__(self, transaction_repo: TransactionRepository):
        self.transaction_repo = transaction_repo

    async def execute(self, transaction_id: int) -> Result[TransactionResponseDTO]:
        """
        Errors:
            TRANSACTION_NOT_FOUND: No transaction with that ID
        """
        transaction = await self.transaction_repo.get_by_id(transaction_id)

        if not transaction:
            return Return.err(
                Error(
                    code="TRANSACTION_NOT_FOUND",
                    message=f"Transaction {transaction_id} not found",
                )
            )

        return Return.ok(TransactionResponseDTO.from_entity(transaction))
