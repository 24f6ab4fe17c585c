from .errors import ConcurrencyConflict
from .user_repository import UserRepository
from .transaction_repository import TransactionRepository

__all__ = [
    "ConcurrencyConflict",
    "UserRepository",
    "TransactionRepository",
]
