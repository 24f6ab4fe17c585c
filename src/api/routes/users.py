"""User API Routes

FastAPI routes for onboarding users and maintaining their profiles.
Balances are read-only here; only settlement moves money.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.schemas.ledger_request import CreateUserRequestSchema, UpdateUserRequestSchema
from src.app.use_cases.accounts import (
    CreateUser,
    GetUser,
    ListUsers,
    UpdateUser,
    CreateUserCommandDTO,
    UpdateUserCommandDTO,
    UserResponseDTO,
    ListUsersResponseDTO,
)
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.user import AccountStatus
from src.depends import get_session
from src.api.error import raise_for_error

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=UserResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Username or email already registered"}}
)
async def create_user(
    request: CreateUserRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Onboard a user with an optional opening balance.

    **Returns:**
    - 201: User created
    - 409: USERNAME_TAKEN / EMAIL_TAKEN
    """
    uow = SqlAlchemyUnitOfWork(session)
    user_repo = SqlAlchemyUserRepository(session)

    command = CreateUserCommandDTO(**request.model_dump())
    result = await CreateUser(uow, user_repo).execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "",
    response_model=ListUsersResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_users(
    account_status: Optional[AccountStatus] = Query(default=None),
    limit: int = Query(default=ApplicationConfig.DEFAULT_PAGE_LIMIT, gt=0, le=ApplicationConfig.MAX_PAGE_LIMIT),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session)
):
    """List users ordered by ID, optionally filtered by account status."""
    user_repo = SqlAlchemyUserRepository(session)

    result = await ListUsers(user_repo).execute(
        account_status=account_status, limit=limit, offset=offset
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "/{user_id}",
    response_model=UserResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "User not found"}}
)
async def get_user(
    user_id: int,
    session: AsyncSession = Depends(get_session)
):
    """Get a user, including the current balance."""
    user_repo = SqlAlchemyUserRepository(session)

    result = await GetUser(user_repo).execute(user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.patch(
    "/{user_id}",
    response_model=UserResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {"description": "User not found"},
        409: {"description": "Username or email already registered"},
    }
)
async def update_user(
    user_id: int,
    request: UpdateUserRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Partially update a user profile.

    Only fields present in the request body are changed.
    """
    uow = SqlAlchemyUnitOfWork(session)
    user_repo = SqlAlchemyUserRepository(session)

    command = UpdateUserCommandDTO(**request.model_dump(exclude_unset=True))
    result = await UpdateUser(uow, user_repo).execute(user_id, command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
