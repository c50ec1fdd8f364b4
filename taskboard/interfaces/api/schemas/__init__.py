from .auth import SignupRequest, SignupResponse, Token
from .realtime import ChannelAuthResponse
from .stats import AdminSnapshotRead, RecentTodoRead, StatsRead
from .todo import (
    BulkActionRequest,
    BulkActionResponse,
    TodoCreate,
    TodoRead,
    TodoToggle,
    TodoUpdate,
)
from .user import PendingUserRead, UserRead, UserReviewRequest, UserReviewResponse

__all__ = [
    "SignupRequest",
    "SignupResponse",
    "Token",
    "ChannelAuthResponse",
    "AdminSnapshotRead",
    "RecentTodoRead",
    "StatsRead",
    "BulkActionRequest",
    "BulkActionResponse",
    "TodoCreate",
    "TodoRead",
    "TodoToggle",
    "TodoUpdate",
    "PendingUserRead",
    "UserRead",
    "UserReviewRequest",
    "UserReviewResponse",
]
