"""UpdateUser Use Case

Applies a partial profile update. Only explicitly provided fields change.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_repository import UserRepository
from .dtos import UpdateUserCommandDTO, UserResponseDTO

logger = logging.getLogger(__name__)


class UpdateUser:
    """
    Use Case: Update user profile

    Business Rules:
    1. User must exist
    2. Fields absent from the command are not touched (no implicit defaults)
    3. username/email stay unique
    4. Balance is never changed here; only settlement moves money
    """

    def __init__(self, uow: UnitOfWork, user_repo: UserRepository):
        self.uow = uow
        self.user_repo = user_repo

    async def execute(self, user_id: int, command: UpdateUserCommandDTO) -> Result[UserResponseDTO]:
        """
        Errors:
            USER_NOT_FOUND: No user with that ID
            USERNAME_TAKEN / EMAIL_TAKEN: New value belongs to another user
        """
        try:
            user = await self.user_repo.get_by_id(user_id)
            if not user:
                return Return.err(Error(code="USER_NOT_FOUND", message=f"User {user_id} not found"))

            changes = command.changes()

            if "username" in changes and changes["username"] != user.username:
                other = await self.user_repo.get_by_username(changes["username"])
                if other and other.id != user.id:
                    return Return.err(
                        Error(code="USERNAME_TAKEN", message=f"Username {changes['username']} is already taken")
                    )

            if "email" in changes and changes["email"] != user.email:
                other = await self.user_repo.get_by_email(changes["email"])
                if other and other.id != user.id:
                    return Return.err(
                        Error(code="EMAIL_TAKEN", message=f"Email {changes['email']} is already registered")
                    )

            for field_name, value in changes.items():
                setattr(user, field_name, value)

            updated = await self.user_repo.update(user)
            response = UserResponseDTO.from_entity(updated)
            await self.uow.commit()

            logger.info(f"Updated user {user_id}: fields={sorted(changes)}")
            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to update user {user_id}: {e}")
            return Return.err(
                Error(
                    code="UPDATE_USER_FAILED",
                    message="Failed to update user",
                    reason=str(e),
                )
            )
