"""Use cases for managing users."""

from .authenticate_user import AuthenticationStatus, authenticate_user
from .create_user import create_user
from .get_user import get_user
from .list_users import list_pending_users, list_users
from .register_user import register_user
from .review_user import review_user

__all__ = [
    "AuthenticationStatus",
    "authenticate_user",
    "create_user",
    "get_user",
    "list_pending_users",
    "list_users",
    "register_user",
    "review_user",
]
