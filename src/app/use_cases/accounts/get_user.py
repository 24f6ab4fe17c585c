"""Get User Use Case

Retrieves a user and its current balance.
"""

from libs.result import Result, Return, Error
from src.app.repositories.user_repository import UserRepository
from .dtos import UserResponseDTO


class GetUser:
    """
    Get User Use Case

    Read-only lookup; returns the balance as of the latest committed settlement.
    """

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def execute(self, user_id: int) -> Result[UserResponseDTO]:
        """
        Errors:
            USER_NOT_FOUND: No user with that ID
        """
        user = await self.user_repo.get_by_id(user_id)

        if not user:
            return Return.err(
                Error(
                    code="USER_NOT_FOUND",
                    message=f"User {user_id} not found",
                )
            )

        return Return.ok(UserResponseDTO.from_entity(user))
