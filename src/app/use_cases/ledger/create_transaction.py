"""CreateTransaction Use Case

Records a new PENDING transaction for a user. Creation never touches the
balance; the economic effect is deferred to settlement.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_repository import UserRepository
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.transaction import Transaction, TransactionStatus, DEBIT_TYPES
from .dtos import CreateTransactionCommandDTO, TransactionResponseDTO

logger = logging.getLogger(__name__)


class CreateTransaction:
    """
    Use Case: Create a PENDING transaction

    Business Rules:
    1. The owning user must exist
    2. amount > 0 (enforced by the command DTO)
    3. Advisory balance pre-check for PAYMENT/WITHDRAWAL (optional). Only the
       check made at settlement time is authoritative, because the balance can
       change between creation and settlement.
    4. reference_id is not unique; duplicates are logged, or rejected when
       reject_duplicate_reference is set
    5. No balance mutation

    Flow:
    1. Load user
    2. Optional pre-check of balance
    3. Optional duplicate reference check
    4. Insert transaction with status PENDING
    5. Commit and return the persisted transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        user_repo: UserRepository,
        transaction_repo: TransactionRepository,
        balance_precheck: bool = False,
        reject_duplicate_reference: bool = False,
    ):
        self.uow = uow
        self.user_repo = user_repo
        self.transaction_repo = transaction_repo
        self.balance_precheck = balance_precheck
        self.reject_duplicate_reference = reject_duplicate_reference

    async def execute(self, command: CreateTransactionCommandDTO) -> Result[TransactionResponseDTO]:
        """
        Execute transaction creation

        Args:
            command: CreateTransactionCommandDTO

        Returns:
            Result[TransactionResponseDTO]: Persisted PENDING transaction or error

        Errors:
            USER_NOT_FOUND: Owning user does not exist
            INSUFFICIENT_FUNDS: Advisory pre-check failed
            DUPLICATE_REFERENCE: reference_id already used (only when rejecting duplicates)
        """
        try:
            # Step 1: User must exist (plain read, no lock: creation writes no balance)
            user = await self.user_repo.get_by_id(command.user_id)
            if not user:
                return Return.err(
                    Error(
                        code="USER_NOT_FOUND",
                        message=f"User {command.user_id} not found",
                    )
                )

            # Step 2: Advisory pre-check, re-validated at settlement
            if (
                self.balance_precheck
                and command.transaction_type in DEBIT_TYPES
                and command.amount > user.balance
            ):
                return Return.err(
                    Error(
                        code="INSUFFICIENT_FUNDS",
                        message=f"Insufficient balance. Required: {command.amount}, Available: {user.balance}",
                        reason=f"balance={user.balance}, required={command.amount}",
                    )
                )

            # Step 3: reference_id is a correlation token, not a unique key
            if command.reference_id:
                duplicates = await self.transaction_repo.get_by_reference_id(
                    command.user_id, command.reference_id
                )
                if duplicates:
                    if self.reject_duplicate_reference:
                        return Return.err(
                            Error(
                                code="DUPLICATE_REFERENCE",
                                message=f"reference_id {command.reference_id} already used by user {command.user_id}",
                                reason=f"existing_transaction_ids={[t.id for t in duplicates]}",
                            )
                        )
                    logger.warning(
                        f"Duplicate reference_id {command.reference_id!r} for user {command.user_id} "
                        f"(existing transactions: {[t.id for t in duplicates]})"
                    )

            # Step 4: Insert PENDING transaction
            transaction = Transaction(
                user_id=command.user_id,
                transaction_type=command.transaction_type,
                amount=command.amount,
                status=TransactionStatus.PENDING,
                payment_method=command.payment_method,
                description=command.description,
                reference_id=command.reference_id,
            )
            transaction.updated_at = transaction.created_at

            created = await self.transaction_repo.create(transaction)
            response = TransactionResponseDTO.from_entity(created)

            # Step 5: Commit
            await self.uow.commit()

            logger.info(
                f"Created {response.transaction_type.value} transaction {response.id} "
                f"for user {response.user_id}: amount={response.amount}"
            )
            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create transaction for user {command.user_id}: {e}")
            return Return.err(
                Error(
                    code="CREATE_TRANSACTION_FAILED",
                    message="Failed to create transaction",
                    reason=str(e),
                )
            )
