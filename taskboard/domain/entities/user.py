"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime

ROLE_ADMIN = "admin"
ROLE_USER = "user"
ROLES = (ROLE_ADMIN, ROLE_USER)


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    name: str | None
    email: str
    password: str
    role: str
    approved: bool
    created_at: datetime | None

    def has_role(self, role: str) -> bool:
        """Return ``True`` when the user's role matches ``role``."""

        return self.role.lower() == role.lower()

    def is_admin(self) -> bool:
        """Return ``True`` when the user is an administrator."""

        return self.has_role(ROLE_ADMIN)

    @property
    def display_name(self) -> str:
        return self.name or self.email


@dataclass(frozen=True)
class PendingUser:
    """A registration waiting for an administrator decision."""

    user_id: int
    name: str | None
    email: str
    registered_at: datetime | None


__all__ = ["ROLE_ADMIN", "ROLE_USER", "ROLES", "PendingUser", "User"]
