"""List Users Use Case"""

from typing import Optional
from libs.result import Result, Return
from src.app.repositories.user_repository import UserRepository
from src.domain.user import AccountStatus
from .dtos import ListUsersResponseDTO, UserResponseDTO


class ListUsers:
    """Paginated user listing with optional account status filter"""

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def execute(
        self,
        account_status: Optional[AccountStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Result[ListUsersResponseDTO]:
        users, total = await self.user_repo.list(
            account_status=account_status, limit=limit, offset=offset
        )

        return Return.ok(
            ListUsersResponseDTO(
                users=[UserResponseDTO.from_entity(user) for user in users],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
