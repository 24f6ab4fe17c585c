"""Account use cases"""
from .create_user import CreateUser
from .get_user import GetUser
from .list_users import ListUsers
from .update_user import UpdateUser
from .dtos import (
    CreateUserCommandDTO,
    UpdateUserCommandDTO,
    UserResponseDTO,
    ListUsersResponseDTO,
)

__all__ = [
    "CreateUser",
    "GetUser",
    "ListUsers",
    "UpdateUser",
    "CreateUserCommandDTO",
    "UpdateUserCommandDTO",
    "UserResponseDTO",
    "ListUsersResponseDTO",
]
