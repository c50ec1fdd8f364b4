"""Repository implementations for infrastructure layer."""

from .todo_repository import (
    FILTER_ALL,
    FILTER_COMPLETED,
    FILTER_PENDING,
    TodoRepository,
)
from .user_repository import UserRepository

__all__ = [
    "FILTER_ALL",
    "FILTER_COMPLETED",
    "FILTER_PENDING",
    "TodoRepository",
    "UserRepository",
]
