"""Per-update session context passed explicitly to services."""

from dataclasses import dataclass
from typing import Optional

from mallfinder.models.geo import GeoPoint
from mallfinder.models.user import User


@dataclass(frozen=True)
class SessionContext:
    """Who is acting, and what we know about them, for one bot update."""

    telegram_user_id: int
    user: Optional[User] = None
    is_admin: bool = False
    location: Optional[GeoPoint] = None

    @property
    def is_registered(self) -> bool:
        return self.user is not None

    @property
    def user_id(self) -> Optional[int]:
        return self.user.id if self.user else None
