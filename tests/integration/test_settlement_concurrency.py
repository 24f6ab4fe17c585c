"""Concurrent settlement against one balance

Each settlement runs in its own session (own connection), the way two API
requests would.
"""

import asyncio
import pytest
from decimal import Decimal

from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.repositories.transaction_repository import SqlAlchemyTransactionRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.ledger import (
    CreateTransaction,
    SettleTransaction,
    CreateTransactionCommandDTO,
    SettleTransactionCommandDTO,
)
from src.domain.transaction import TransactionType, TransactionStatus, PaymentMethod


async def create_payment(session_factory, user_id, amount):
    async with session_factory() as session:
        result = await CreateTransaction(
            SqlAlchemyUnitOfWork(session),
            SqlAlchemyUserRepository(session),
            SqlAlchemyTransactionRepository(session),
        ).execute(
            CreateTransactionCommandDTO(
                user_id=user_id,
                transaction_type=TransactionType.PAYMENT,
                amount=Decimal(amount),
                payment_method=PaymentMethod.DANA,
            )
        )
        return result.value.id


async def settle(session_factory, transaction_id, status=TransactionStatus.SUCCESS, max_retries=5):
    async with session_factory() as session:
        return await SettleTransaction(
            SqlAlchemyUnitOfWork(session),
            SqlAlchemyUserRepository(session),
            SqlAlchemyTransactionRepository(session),
            max_retries=max_retries,
            retry_backoff_seconds=0.02,
        ).execute(SettleTransactionCommandDTO(transaction_id=transaction_id, status=status))


class TestConcurrentSettlement:
    """Concurrent settlements never overdraw or double-apply"""

    @pytest.mark.asyncio
    async def test_two_payments_exceeding_balance(self, session_factory, create_user):
        """Two 600.00 payments on 1000.00: exactly one succeeds, final balance 400.00"""
        # Arrange
        user = await create_user("judy", "1000.00")
        first_id = await create_payment(session_factory, user.id, "600.00")
        second_id = await create_payment(session_factory, user.id, "600.00")

        # Act
        results = await asyncio.gather(
            settle(session_factory, first_id),
            settle(session_factory, second_id),
        )

        # Assert
        succeeded = [r for r in results if r.is_ok()]
        failed = [r for r in results if r.is_err()]
        assert len(succeeded) == 1
        assert len(failed) == 1
        assert failed[0].error.code == "INSUFFICIENT_FUNDS"
        assert succeeded[0].value.balance_after == Decimal("400.00")

        async with session_factory() as session:
            reloaded = await SqlAlchemyUserRepository(session).get_by_id(user.id)
            pending, _ = await SqlAlchemyTransactionRepository(session).list(
                status=TransactionStatus.PENDING, user_id=user.id
            )
        assert reloaded.balance == Decimal("400.00")
        assert len(pending) == 1

    @pytest.mark.asyncio
    async def test_same_transaction_settled_concurrently(self, session_factory, create_user):
        """Racing settlements of one transaction apply its delta exactly once"""
        user = await create_user("ken", "1000.00")
        txn_id = await create_payment(session_factory, user.id, "100.00")

        results = await asyncio.gather(
            settle(session_factory, txn_id, TransactionStatus.SUCCESS),
            settle(session_factory, txn_id, TransactionStatus.SUCCESS),
            settle(session_factory, txn_id, TransactionStatus.CANCELLED),
        )

        assert sum(1 for r in results if r.is_ok()) == 1
        for r in results:
            if r.is_err():
                assert r.error.code == "TRANSACTION_ALREADY_PROCESSED"

        async with session_factory() as session:
            reloaded = await SqlAlchemyUserRepository(session).get_by_id(user.id)
            txn = await SqlAlchemyTransactionRepository(session).get_by_id(txn_id)

        expected = Decimal("900.00") if txn.status == TransactionStatus.SUCCESS else Decimal("1000.00")
        assert reloaded.balance == expected

    @pytest.mark.asyncio
    async def test_many_payments_never_overdraw(self, session_factory, create_user):
        """Four 300.00 payments on 1000.00: three succeed, balance ends at 100.00"""
        user = await create_user("liam", "1000.00")
        txn_ids = [await create_payment(session_factory, user.id, "300.00") for _ in range(4)]

        results = await asyncio.gather(
            *(settle(session_factory, txn_id, max_retries=10) for txn_id in txn_ids)
        )

        succeeded = [r for r in results if r.is_ok()]
        assert len(succeeded) == 3
        assert all(r.error.code == "INSUFFICIENT_FUNDS" for r in results if r.is_err())

        async with session_factory() as session:
            reloaded = await SqlAlchemyUserRepository(session).get_by_id(user.id)
        assert reloaded.balance == Decimal("100.00")
        assert reloaded.version == 4
