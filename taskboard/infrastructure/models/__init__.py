"""ORM models used by the application infrastructure."""

from .todo import TodoModel
from .user import UserModel

__all__ = [
    "TodoModel",
    "UserModel",
]
