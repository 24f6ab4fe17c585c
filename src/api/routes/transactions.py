"""Transaction API Routes

FastAPI routes for creating, settling and listing transactions.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.schemas.ledger_request import (
    CreateTransactionRequestSchema,
    SettleTransactionRequestSchema,
)
from src.app.use_cases.ledger import (
    CreateTransaction,
    SettleTransaction,
    GetTransaction,
    ListTransactions,
    CreateTransactionCommandDTO,
    SettleTransactionCommandDTO,
    ListTransactionsQueryDTO,
    TransactionResponseDTO,
    SettlementResponseDTO,
    ListTransactionsResponseDTO,
)
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.repositories.transaction_repository import SqlAlchemyTransactionRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.transaction import TransactionType, TransactionStatus
from src.depends import get_session
from src.api.error import raise_for_error

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post(
    "",
    response_model=TransactionResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: {"description": "Insufficient balance (advisory pre-check)"},
        404: {"description": "User not found"},
    }
)
async def create_transaction(
    request: CreateTransactionRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Create a PENDING top-up, payment or withdrawal.

    No balance changes until the transaction is settled to SUCCESS.

    **Returns:**
    - 201: Transaction created with status PENDING
    - 402: Balance lower than the amount (PAYMENT / WITHDRAWAL)
    - 404: User not found
    """
    uow = SqlAlchemyUnitOfWork(session)
    user_repo = SqlAlchemyUserRepository(session)
    transaction_repo = SqlAlchemyTransactionRepository(session)

    command = CreateTransactionCommandDTO(
        user_id=request.user_id,
        transaction_type=request.transaction_type,
        amount=request.amount,
        payment_method=request.payment_method,
        description=request.description,
        reference_id=request.reference_id,
    )

    use_case = CreateTransaction(
        uow,
        user_repo,
        transaction_repo,
        balance_precheck=ApplicationConfig.BALANCE_PRECHECK_ON_CREATE,
        reject_duplicate_reference=ApplicationConfig.REJECT_DUPLICATE_REFERENCE_ID,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/{transaction_id}/settle",
    response_model=SettlementResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        402: {"description": "Insufficient balance, transaction stays PENDING"},
        404: {"description": "Transaction not found"},
        409: {"description": "Transaction already processed"},
        503: {"description": "Persistent storage conflict, safe to retry"},
    }
)
async def settle_transaction(
    transaction_id: int,
    request: SettleTransactionRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Settle a PENDING transaction into SUCCESS, FAILED or CANCELLED.

    SUCCESS applies the balance delta (TOP_UP credits, PAYMENT/WITHDRAWAL debit)
    in the same database transaction as the status change.

    **Returns:**
    - 200: Settled; body includes balance_before / balance_after
    - 400: Target status is PENDING
    - 402: Settlement would make the balance negative
    - 404: Transaction not found
    - 409: Transaction already processed
    - 503: Concurrent updates kept conflicting
    """
    uow = SqlAlchemyUnitOfWork(session)
    user_repo = SqlAlchemyUserRepository(session)
    transaction_repo = SqlAlchemyTransactionRepository(session)

    use_case = SettleTransaction(
        uow,
        user_repo,
        transaction_repo,
        max_retries=ApplicationConfig.SETTLEMENT_MAX_RETRIES,
        retry_backoff_seconds=ApplicationConfig.SETTLEMENT_RETRY_BACKOFF_SECONDS,
        enforce_account_status=ApplicationConfig.ENFORCE_ACCOUNT_STATUS_ON_SETTLE,
    )
    result = await use_case.execute(
        SettleTransactionCommandDTO(transaction_id=transaction_id, status=request.status)
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "",
    response_model=ListTransactionsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_transactions(
    transaction_type: Optional[TransactionType] = Query(default=None, alias="type"),
    transaction_status: Optional[TransactionStatus] = Query(default=None, alias="status"),
    user_id: Optional[int] = Query(default=None),
    limit: int = Query(default=ApplicationConfig.DEFAULT_PAGE_LIMIT, gt=0, le=ApplicationConfig.MAX_PAGE_LIMIT),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session)
):
    """
    List transactions, most recent first.

    **Query parameters:** `type`, `status`, `user_id`, `limit`, `offset`
    """
    transaction_repo = SqlAlchemyTransactionRepository(session)

    query = ListTransactionsQueryDTO(
        transaction_type=transaction_type,
        status=transaction_status,
        user_id=user_id,
        limit=limit,
        offset=offset,
    )
    result = await ListTransactions(transaction_repo).execute(query)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "Transaction not found"}}
)
async def get_transaction(
    transaction_id: int,
    session: AsyncSession = Depends(get_session)
):
    """Get a single transaction by ID."""
    transaction_repo = SqlAlchemyTransactionRepository(session)

    result = await GetTransaction(transaction_repo).execute(transaction_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
