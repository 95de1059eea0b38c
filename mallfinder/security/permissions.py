"""Permission checks for bot commands."""

from enum import Enum
from typing import Optional

from mallfinder.models.user import User, UserRole


class Permission(str, Enum):
    """Permission types."""

    MANAGE_CATALOG = "manage_catalog"


class PermissionDenied(Exception):
    """Raised when the acting user lacks a permission."""

    def __init__(self, permission: Permission, telegram_user_id: Optional[int] = None):
        self.permission = permission
        self.telegram_user_id = telegram_user_id
        super().__init__(f"Permission denied: {permission.value}")


class PermissionChecker:
    """Check user permissions for actions."""

    def __init__(self, admin_user_ids: list[int] | None = None):
        self.admin_user_ids = admin_user_ids or []

    def is_admin(self, telegram_user_id: int, user: Optional[User] = None) -> bool:
        """Admins are configured by Telegram ID or carry the ADMIN role."""
        if telegram_user_id in self.admin_user_ids:
            return True
        return user is not None and user.role == UserRole.ADMIN

    def can_manage_catalog(self, telegram_user_id: int, user: Optional[User] = None) -> bool:
        """Malls, stores and promotions are edited by admins only."""
        return self.is_admin(telegram_user_id, user)
