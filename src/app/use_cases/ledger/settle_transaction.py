"""SettleTransaction Use Case

Moves a PENDING transaction into a terminal status and, for SUCCESS, applies
its balance delta to the owning user in the same database transaction.
"""

import asyncio
import logging
from libs.result import Result, Return, Error
from sqlalchemy.exc import DBAPIError, OperationalError
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.errors import ConcurrencyConflict
from src.app.repositories.user_repository import UserRepository
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.transaction import TransactionStatus, TERMINAL_STATUSES
from .dtos import SettleTransactionCommandDTO, SettlementResponseDTO, TransactionResponseDTO

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


def is_retryable(exc: Exception) -> bool:
    """True for storage-level contention that a fresh attempt can resolve"""
    if isinstance(exc, (ConcurrencyConflict, OperationalError)):
        return True
    if isinstance(exc, DBAPIError):
        orig = exc.orig
        sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
        return sqlstate in RETRYABLE_SQLSTATES
    return False


class SettleTransaction:
    """
    Use Case: Settle a PENDING transaction

    Business Rules:
    1. Only PENDING transactions can be settled; terminal statuses are immutable
       (a retry with the same target status is rejected too)
    2. Target status must be SUCCESS, FAILED or CANCELLED
    3. Balance delta applies only on SUCCESS: TOP_UP +amount,
       PAYMENT/WITHDRAWAL -amount
    4. The user's current balance is re-read under lock and must stay >= 0;
       otherwise INSUFFICIENT_FUNDS and the transaction stays PENDING
    5. Status change and balance change commit together or not at all
    6. Storage conflicts roll back and retry from the start with backoff

    Flow (one attempt):
    1. Lock transaction row (SELECT FOR UPDATE)
    2. Reject if not PENDING
    3. Lock owning user row (SELECT FOR UPDATE)
    4. Optional account status gate
    5. Compute delta and validate resulting balance
    6. Guarded status update (WHERE status = PENDING)
    7. Guarded balance update (WHERE version = observed version)
    8. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        user_repo: UserRepository,
        transaction_repo: TransactionRepository,
        max_retries: int = 3,
        retry_backoff_seconds: float = 0.05,
        enforce_account_status: bool = False,
    ):
        self.uow = uow
        self.user_repo = user_repo
        self.transaction_repo = transaction_repo
        self.max_retries = max_retries
        self.retry_backoff_seconds = retry_backoff_seconds
        self.enforce_account_status = enforce_account_status

    async def execute(self, command: SettleTransactionCommandDTO) -> Result[SettlementResponseDTO]:
        """
        Execute settlement with bounded retries on storage conflicts

        Args:
            command: SettleTransactionCommandDTO with transaction_id and target status

        Returns:
            Result[SettlementResponseDTO]: Settled transaction with balance snapshots or error

        Errors:
            INVALID_INPUT: Target status is not terminal
            TRANSACTION_NOT_FOUND: No transaction with that ID
            TRANSACTION_ALREADY_PROCESSED: Transaction is not PENDING
            USER_NOT_FOUND: Owning user vanished
            ACCOUNT_NOT_ACTIVE: Account status gate rejected a SUCCESS settlement
            INSUFFICIENT_FUNDS: Settlement would make the balance negative
            SETTLEMENT_CONFLICT: Storage conflicts persisted after all retries
        """
        if command.status not in TERMINAL_STATUSES:
            return Return.err(
                Error(
                    code="INVALID_INPUT",
                    message=f"Cannot settle into status {command.status.value}",
                    reason="status must be one of SUCCESS, FAILED, CANCELLED",
                )
            )

        attempt = 0
        while True:
            try:
                return await self._attempt(command)

            except Exception as e:
                await self.uow.rollback()

                if not is_retryable(e):
                    logger.error(f"Settlement of transaction {command.transaction_id} failed: {e}")
                    return Return.err(
                        Error(
                            code="SETTLE_TRANSACTION_FAILED",
                            message="Failed to settle transaction",
                            reason=str(e),
                        )
                    )

                if attempt >= self.max_retries:
                    logger.error(
                        f"Settlement of transaction {command.transaction_id} gave up "
                        f"after {attempt + 1} attempts: {e}"
                    )
                    return Return.err(
                        Error(
                            code="SETTLEMENT_CONFLICT",
                            message="Settlement could not complete due to concurrent updates, try again later",
                            reason=str(e),
                        )
                    )

                delay = self.retry_backoff_seconds * (2 ** attempt)
                attempt += 1
                logger.warning(
                    f"Conflict settling transaction {command.transaction_id} "
                    f"(attempt {attempt}/{self.max_retries}), retrying in {delay:.3f}s: {e}"
                )
                await asyncio.sleep(delay)

    async def _attempt(self, command: SettleTransactionCommandDTO) -> Result[SettlementResponseDTO]:
        # Step 1: Lock transaction row
        transaction = await self.transaction_repo.get_by_id(
            command.transaction_id, for_update=True
        )
        if not transaction:
            return await self._reject(
                Error(
                    code="TRANSACTION_NOT_FOUND",
                    message=f"Transaction {command.transaction_id} not found",
                )
            )

        # Step 2: Terminal statuses never change
        if not transaction.is_pending():
            return await self._reject(
                Error(
                    code="TRANSACTION_ALREADY_PROCESSED",
                    message=f"Transaction {transaction.id} already processed with status {transaction.status.value}",
                    reason=f"current_status={transaction.status.value}, requested={command.status.value}",
                )
            )

        # Step 3: Lock owning user row and read its current balance
        user = await self.user_repo.get_by_id(transaction.user_id, for_update=True)
        if not user:
            return await self._reject(
                Error(
                    code="USER_NOT_FOUND",
                    message=f"User {transaction.user_id} owning transaction {transaction.id} not found",
                )
            )

        # Step 4: Account status gate
        if command.status == TransactionStatus.SUCCESS and not user.is_active():
            if self.enforce_account_status:
                return await self._reject(
                    Error(
                        code="ACCOUNT_NOT_ACTIVE",
                        message=f"User {user.id} is {user.account_status.value}; only FAILED or CANCELLED settlements are allowed",
                        reason=f"account_status={user.account_status.value}",
                    )
                )
            logger.warning(
                f"Settling transaction {transaction.id} to SUCCESS for "
                f"{user.account_status.value} user {user.id}"
            )

        # Step 5: Authoritative balance check against the locked row
        delta = transaction.balance_delta(command.status)
        balance_before = user.balance
        balance_after = balance_before + delta

        if balance_after < 0:
            logger.warning(
                f"Insufficient funds settling transaction {transaction.id}: "
                f"balance={balance_before}, delta={delta}"
            )
            return await self._reject(
                Error(
                    code="INSUFFICIENT_FUNDS",
                    message=f"Insufficient balance. Required: {-delta}, Available: {balance_before}",
                    reason=f"balance={balance_before}, required={-delta}",
                )
            )

        # Step 6: Guarded status transition; losing a race means someone else settled it
        settled = await self.transaction_repo.compare_and_set_status(
            transaction.id, TransactionStatus.PENDING, command.status
        )
        if settled is None:
            return await self._reject(
                Error(
                    code="TRANSACTION_ALREADY_PROCESSED",
                    message=f"Transaction {command.transaction_id} was settled concurrently",
                    reason=f"requested={command.status.value}",
                )
            )

        # Step 7: Guarded balance write (raises ConcurrencyConflict on a stale version)
        if delta != 0:
            updated_user = await self.user_repo.apply_balance_delta(
                user.id, delta, expected_version=user.version
            )
            balance_after = updated_user.balance

        response = SettlementResponseDTO(
            transaction=TransactionResponseDTO.from_entity(settled),
            balance_before=balance_before,
            balance_after=balance_after,
            balance_delta=delta,
        )

        # Step 8: Commit status and balance together
        await self.uow.commit()

        logger.info(
            f"Settled transaction {settled.id} to {settled.status.value} for user {settled.user_id}: "
            f"delta={delta}, balance {balance_before} -> {balance_after}"
        )
        return Return.ok(response)

    async def _reject(self, error: Error) -> Result[SettlementResponseDTO]:
        await self.uow.rollback()
        return Return.err(error)
