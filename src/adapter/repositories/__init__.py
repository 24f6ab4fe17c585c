from .user_repository import SqlAlchemyUserRepository
from .transaction_repository import SqlAlchemyTransactionRepository

__all__ = [
    "SqlAlchemyUserRepository",
    "SqlAlchemyTransactionRepository",
]
