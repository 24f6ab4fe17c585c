"""Unit tests for ListTransactions and GetTransaction use cases"""

import pytest
from decimal import Decimal
from pydantic import ValidationError

from src.app.use_cases.ledger.list_transactions import ListTransactions
from src.app.use_cases.ledger.get_transaction import GetTransaction
from src.app.use_cases.ledger.dtos import ListTransactionsQueryDTO
from src.domain.transaction import Transaction, TransactionType, TransactionStatus, PaymentMethod


def make_transaction(txn_id: int) -> Transaction:
    return Transaction(
        id=txn_id,
        user_id=1,
        transaction_type=TransactionType.TOP_UP,
        amount=Decimal("10.00"),
        payment_method=PaymentMethod.CREDIT_CARD,
    )


class TestListTransactions:
    """Test transaction listing"""

    @pytest.mark.asyncio
    async def test_passes_filters_and_pagination(self, mock_transaction_repo):
        # Arrange
        mock_transaction_repo.list.return_value = ([make_transaction(2), make_transaction(1)], 12)
        query = ListTransactionsQueryDTO(
            transaction_type=TransactionType.TOP_UP,
            status=TransactionStatus.PENDING,
            user_id=1,
            limit=2,
            offset=4,
        )

        # Act
        result = await ListTransactions(mock_transaction_repo).execute(query)

        # Assert
        assert result.is_ok()
        assert [t.id for t in result.value.transactions] == [2, 1]
        assert result.value.total == 12
        assert result.value.limit == 2
        assert result.value.offset == 4
        mock_transaction_repo.list.assert_awaited_once_with(
            transaction_type=TransactionType.TOP_UP,
            status=TransactionStatus.PENDING,
            user_id=1,
            limit=2,
            offset=4,
        )

    @pytest.mark.asyncio
    async def test_defaults_to_first_page_without_filters(self, mock_transaction_repo):
        mock_transaction_repo.list.return_value = ([], 0)

        result = await ListTransactions(mock_transaction_repo).execute(ListTransactionsQueryDTO())

        assert result.is_ok()
        assert result.value.transactions == []
        mock_transaction_repo.list.assert_awaited_once_with(
            transaction_type=None, status=None, user_id=None, limit=50, offset=0
        )

    def test_negative_offset_is_rejected(self):
        with pytest.raises(ValidationError):
            ListTransactionsQueryDTO(offset=-1)


class TestGetTransaction:
    """Test single transaction lookup"""

    @pytest.mark.asyncio
    async def test_returns_transaction(self, mock_transaction_repo):
        mock_transaction_repo.get_by_id.return_value = make_transaction(5)

        result = await GetTransaction(mock_transaction_repo).execute(5)

        assert result.is_ok()
        assert result.value.id == 5
        assert result.value.status == TransactionStatus.PENDING

    @pytest.mark.asyncio
    async def test_not_found(self, mock_transaction_repo):
        mock_transaction_repo.get_by_id.return_value = None

        result = await GetTransaction(mock_transaction_repo).execute(5)

        assert result.is_err()
        assert result.error.code == "TRANSACTION_NOT_FOUND"
