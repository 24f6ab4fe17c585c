import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_user_repo():
    """Mock user repository"""
    repo = MagicMock()
    repo.get_by_id = AsyncMock()
    repo.get_by_username = AsyncMock(return_value=None)
    repo.get_by_email = AsyncMock(return_value=None)
    repo.create = AsyncMock()
    repo.update = AsyncMock()
    repo.list = AsyncMock()
    repo.get_all = AsyncMock()
    repo.apply_balance_delta = AsyncMock()
    return repo


@pytest.fixture
def mock_transaction_repo():
    """Mock transaction repository"""
    repo = MagicMock()
    repo.create = AsyncMock()
    repo.get_by_id = AsyncMock()
    repo.compare_and_set_status = AsyncMock()
    repo.list = AsyncMock()
    repo.get_successful_in_range = AsyncMock(return_value=[])
    repo.get_by_reference_id = AsyncMock(return_value=[])
    repo.get_successful_delta_sum_by_user = AsyncMock()
    return repo
