"""Balance Reconciliation Background Worker

Periodically checks user balances against their settled transactions.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.repositories.transaction_repository import SqlAlchemyTransactionRepository
from src.app.use_cases.ledger import ReconcileBalances, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class BalanceReconcilerWorker:
    """
    Background worker for balance reconciliation

    Read-only: discrepancies are reported and logged, never corrected.

    Usage:
        # Run once
        worker = BalanceReconcilerWorker()
        result = await worker.run_once()

        # Run continuously
        worker = BalanceReconcilerWorker()
        await worker.run_forever(interval_seconds=86400)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        enabled: Optional[bool] = None,
    ):
        """
        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            enabled: Overrides ApplicationConfig.RECONCILIATION_ENABLED
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.enabled = ApplicationConfig.RECONCILIATION_ENABLED if enabled is None else enabled

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("BalanceReconcilerWorker initialized")

    async def run_once(self) -> ReconciliationResultDTO:
        """
        Run reconciliation once

        Returns:
            ReconciliationResultDTO with reconciliation results

        Raises:
            RuntimeError: The reconciliation use case failed
        """
        if not self.enabled:
            logger.info("Balance reconciliation is disabled, skipping")
            return ReconciliationResultDTO(
                total_users_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                reconciliation_time=datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            use_case = ReconcileBalances(
                user_repo=SqlAlchemyUserRepository(session),
                transaction_repo=SqlAlchemyTransactionRepository(session),
            )

            result = await use_case.execute()

            if result.is_err():
                logger.error(f"Reconciliation failed: {result.error.message}")
                raise RuntimeError(f"Reconciliation failed: {result.error.reason or result.error.message}")

            response = result.value

            if response.discrepancies_found > 0:
                logger.error(
                    f"ALERT: {response.discrepancies_found} balance discrepancies found!"
                )

            return response

    async def run_forever(self, interval_seconds: int = 86400):
        """
        Run reconciliation continuously at specified interval

        A failed cycle is logged and the loop keeps going.
        """
        logger.info(
            f"Starting continuous balance reconciliation with {interval_seconds}s interval"
        )

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Reconciliation cycle complete. "
                    f"Checked {result.total_users_checked} users, "
                    f"found {result.discrepancies_found} discrepancies "
                    f"in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Reconciliation cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("BalanceReconcilerWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        python -m src.worker.balance_reconciler --once
        python -m src.worker.balance_reconciler --interval 3600
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Balance Reconciliation Worker")
    parser.add_argument(
        "--once", action="store_true", help="Run once and exit"
    )
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS,
        help="Interval between runs in seconds (default: RECONCILIATION_INTERVAL_SECONDS)"
    )
    args = parser.parse_args()

    worker = BalanceReconcilerWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Reconciliation complete:")
            print(f"  Total users checked: {result.total_users_checked}")
            print(f"  Discrepancies found: {result.discrepancies_found}")
            print(f"  Execution time: {result.execution_time_ms}ms")
            for d in result.discrepancies:
                print(
                    f"  - User {d.user_id} ({d.username}): "
                    f"balance={d.balance}, expected={d.expected_balance}, "
                    f"diff={d.discrepancy}"
                )
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
