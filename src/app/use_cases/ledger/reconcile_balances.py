"""ReconcileBalances Use Case

Checks every user's balance against its settled transaction history.
"""

import logging
import time
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.repositories.user_repository import UserRepository
from src.app.repositories.transaction_repository import TransactionRepository
from .dtos import BalanceDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileBalances:
    """
    Use Case: Reconcile user balances against the ledger

    Business Rules:
    1. expected_balance = opening_balance + sum of SUCCESS deltas
       (TOP_UP positive, PAYMENT and WITHDRAWAL negative)
    2. Any user whose stored balance differs is reported as a discrepancy
    3. Does NOT modify any data (read-only reconciliation)
    """

    def __init__(
        self,
        user_repo: UserRepository,
        transaction_repo: TransactionRepository,
    ):
        self.user_repo = user_repo
        self.transaction_repo = transaction_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        """
        Execute balance reconciliation

        Returns:
            Result[ReconciliationResultDTO]: Reconciliation result with any discrepancies
        """
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting balance reconciliation")

            users = await self.user_repo.get_all()
            discrepancies: list[BalanceDiscrepancyDTO] = []

            for user in users:
                delta_sum = await self.transaction_repo.get_successful_delta_sum_by_user(user.id)
                expected_balance = user.opening_balance + delta_sum

                if user.balance != expected_balance:
                    discrepancy = BalanceDiscrepancyDTO(
                        user_id=user.id,
                        username=user.username,
                        balance=user.balance,
                        expected_balance=expected_balance,
                        discrepancy=user.balance - expected_balance,
                    )
                    discrepancies.append(discrepancy)

                    logger.warning(
                        f"Discrepancy found for user {user.id} ({user.username}): "
                        f"balance={user.balance}, expected={expected_balance}, "
                        f"discrepancy={discrepancy.discrepancy}"
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)

            response = ReconciliationResultDTO(
                total_users_checked=len(users),
                discrepancies_found=len(discrepancies),
                discrepancies=discrepancies,
                reconciliation_time=reconciliation_time,
                execution_time_ms=execution_time_ms,
            )

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {len(users)} users in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {len(users)} balances match "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(response)

        except Exception as e:
            logger.error(f"Balance reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile balances",
                    reason=str(e),
                )
            )
