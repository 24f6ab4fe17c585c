"""Unit tests for account use cases (CreateUser, GetUser, ListUsers, UpdateUser)"""

import pytest
from decimal import Decimal
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from src.app.use_cases.accounts import (
    CreateUser,
    GetUser,
    ListUsers,
    UpdateUser,
    CreateUserCommandDTO,
    UpdateUserCommandDTO,
)
from src.domain.user import User, AccountStatus


def make_user(user_id: int = 1, **overrides) -> User:
    data = {
        "id": user_id,
        "username": "johndoe",
        "email": "john@example.com",
        "full_name": "John Doe",
        "phone_number": "081234567890",
        "balance": Decimal("1000.00"),
        "opening_balance": Decimal("1000.00"),
    }
    data.update(overrides)
    return User(**data)


def persist(user: User) -> User:
    user.id = 1
    return user


@pytest.fixture
def create_command():
    return CreateUserCommandDTO(
        username="johndoe",
        email="john@example.com",
        full_name="John Doe",
        phone_number="081234567890",
        opening_balance=Decimal("250.00"),
    )


class TestCreateUser:
    """Test user onboarding"""

    @pytest.mark.asyncio
    async def test_creates_active_user_with_opening_balance(
        self, mock_uow, mock_user_repo, create_command
    ):
        mock_user_repo.create.side_effect = persist

        result = await CreateUser(mock_uow, mock_user_repo).execute(create_command)

        assert result.is_ok()
        assert result.value.id == 1
        assert result.value.balance == Decimal("250.00")
        assert result.value.account_status == AccountStatus.ACTIVE
        created = mock_user_repo.create.await_args.args[0]
        assert created.opening_balance == Decimal("250.00")
        mock_uow.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_username_taken(self, mock_uow, mock_user_repo, create_command):
        mock_user_repo.get_by_username.return_value = make_user(9)

        result = await CreateUser(mock_uow, mock_user_repo).execute(create_command)

        assert result.is_err()
        assert result.error.code == "USERNAME_TAKEN"
        mock_user_repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_email_taken(self, mock_uow, mock_user_repo, create_command):
        mock_user_repo.get_by_email.return_value = make_user(9)

        result = await CreateUser(mock_uow, mock_user_repo).execute(create_command)

        assert result.is_err()
        assert result.error.code == "EMAIL_TAKEN"

    @pytest.mark.asyncio
    async def test_unique_violation_on_flush_is_mapped(self, mock_uow, mock_user_repo, create_command):
        mock_user_repo.create.side_effect = IntegrityError(
            "INSERT", {}, Exception("UNIQUE constraint failed: users.email")
        )

        result = await CreateUser(mock_uow, mock_user_repo).execute(create_command)

        assert result.is_err()
        assert result.error.code == "EMAIL_TAKEN"
        mock_uow.rollback.assert_awaited_once()

    def test_negative_opening_balance_is_rejected(self):
        with pytest.raises(ValidationError):
            CreateUserCommandDTO(
                username="johndoe",
                email="john@example.com",
                full_name="John Doe",
                phone_number="081234567890",
                opening_balance=Decimal("-1.00"),
            )


class TestGetAndListUsers:
    """Test user reads"""

    @pytest.mark.asyncio
    async def test_get_user(self, mock_user_repo):
        mock_user_repo.get_by_id.return_value = make_user()

        result = await GetUser(mock_user_repo).execute(1)

        assert result.is_ok()
        assert result.value.balance == Decimal("1000.00")

    @pytest.mark.asyncio
    async def test_get_user_not_found(self, mock_user_repo):
        mock_user_repo.get_by_id.return_value = None

        result = await GetUser(mock_user_repo).execute(1)

        assert result.is_err()
        assert result.error.code == "USER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_list_users(self, mock_user_repo):
        mock_user_repo.list.return_value = ([make_user(1), make_user(2, username="jane")], 2)

        result = await ListUsers(mock_user_repo).execute(
            account_status=AccountStatus.ACTIVE, limit=10, offset=0
        )

        assert result.is_ok()
        assert result.value.total == 2
        assert [u.id for u in result.value.users] == [1, 2]
        mock_user_repo.list.assert_awaited_once_with(
            account_status=AccountStatus.ACTIVE, limit=10, offset=0
        )


class TestUpdateUser:
    """Test partial profile updates"""

    @pytest.mark.asyncio
    async def test_only_provided_fields_change(self, mock_uow, mock_user_repo):
        user = make_user()
        mock_user_repo.get_by_id.return_value = user
        mock_user_repo.update.side_effect = lambda u: u

        result = await UpdateUser(mock_uow, mock_user_repo).execute(
            1, UpdateUserCommandDTO(full_name="Johnny Doe")
        )

        assert result.is_ok()
        assert result.value.full_name == "Johnny Doe"
        assert result.value.email == "john@example.com"
        assert result.value.balance == Decimal("1000.00")
        mock_uow.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_suspend_account(self, mock_uow, mock_user_repo):
        mock_user_repo.get_by_id.return_value = make_user()
        mock_user_repo.update.side_effect = lambda u: u

        result = await UpdateUser(mock_uow, mock_user_repo).execute(
            1, UpdateUserCommandDTO(account_status=AccountStatus.SUSPENDED)
        )

        assert result.is_ok()
        assert result.value.account_status == AccountStatus.SUSPENDED

    @pytest.mark.asyncio
    async def test_username_taken_by_other_user(self, mock_uow, mock_user_repo):
        mock_user_repo.get_by_id.return_value = make_user()
        mock_user_repo.get_by_username.return_value = make_user(2, username="jane")

        result = await UpdateUser(mock_uow, mock_user_repo).execute(
            1, UpdateUserCommandDTO(username="jane")
        )

        assert result.is_err()
        assert result.error.code == "USERNAME_TAKEN"
        mock_user_repo.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_user_not_found(self, mock_uow, mock_user_repo):
        mock_user_repo.get_by_id.return_value = None

        result = await UpdateUser(mock_uow, mock_user_repo).execute(
            1, UpdateUserCommandDTO(full_name="Nobody")
        )

        assert result.is_err()
        assert result.error.code == "USER_NOT_FOUND"

    def test_changes_excludes_omitted_and_null_fields(self):
        command = UpdateUserCommandDTO(email="new@example.com", full_name=None)

        assert command.changes() == {"email": "new@example.com"}

    def test_balance_is_not_an_updatable_field(self):
        command = UpdateUserCommandDTO(**{"full_name": "X", "balance": "5.00"})

        assert "balance" not in command.changes()
