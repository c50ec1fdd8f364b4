"""Aggregate application use cases."""

from .stats import get_admin_snapshot, get_stats, list_recent_todos
from .users import authenticate_user, create_user, register_user, review_user

__all__ = [
    "authenticate_user",
    "create_user",
    "get_admin_snapshot",
    "get_stats",
    "list_recent_todos",
    "register_user",
    "review_user",
]
