"""CreateUser Use Case

Onboards a user with an optional opening balance.
"""

import logging
from libs.result import Result, Return, Error
from sqlalchemy.exc import IntegrityError
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_repository import UserRepository
from src.domain.user import User, AccountStatus
from .dtos import CreateUserCommandDTO, UserResponseDTO

logger = logging.getLogger(__name__)


class CreateUser:
    """
    Use Case: Create a user

    Business Rules:
    1. username and email are unique
    2. balance and opening_balance both start at the requested opening balance
    3. New accounts are ACTIVE
    """

    def __init__(self, uow: UnitOfWork, user_repo: UserRepository):
        self.uow = uow
        self.user_repo = user_repo

    async def execute(self, command: CreateUserCommandDTO) -> Result[UserResponseDTO]:
        """
        Errors:
            USERNAME_TAKEN: username already registered
            EMAIL_TAKEN: email already registered
        """
        try:
            if await self.user_repo.get_by_username(command.username):
                return Return.err(
                    Error(code="USERNAME_TAKEN", message=f"Username {command.username} is already taken")
                )

            if await self.user_repo.get_by_email(command.email):
                return Return.err(
                    Error(code="EMAIL_TAKEN", message=f"Email {command.email} is already registered")
                )

            user = User(
                username=command.username,
                email=command.email,
                full_name=command.full_name,
                phone_number=command.phone_number,
                role=command.role,
                account_status=AccountStatus.ACTIVE,
                balance=command.opening_balance,
                opening_balance=command.opening_balance,
            )
            created = await self.user_repo.create(user)
            response = UserResponseDTO.from_entity(created)
            await self.uow.commit()

            logger.info(f"Created user {response.id} ({response.username})")
            return Return.ok(response)

        except IntegrityError as e:
            # Lost a race with a concurrent registration of the same username/email
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="USERNAME_TAKEN" if "username" in str(e.orig).lower() else "EMAIL_TAKEN",
                    message="Username or email is already registered",
                    reason=str(e.orig),
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create user {command.username}: {e}")
            return Return.err(
                Error(
                    code="CREATE_USER_FAILED",
                    message="Failed to create user",
                    reason=str(e),
                )
            )
