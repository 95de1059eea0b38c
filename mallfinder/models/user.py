"""User domain model."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .geo import GeoPoint


class UserRole(str, Enum):
    """User role enumeration."""

    USER = "USER"
    ADMIN = "ADMIN"


class User(BaseModel):
    """Registered user."""

    id: int = Field(description="Auto-increment primary key")
    telegram_user_id: int = Field(description="Telegram user ID", gt=0)
    telegram_username: Optional[str] = Field(default=None, max_length=100)
    full_name: Optional[str] = Field(default=None, max_length=200)
    role: UserRole = Field(default=UserRole.USER)
    last_location_lat: Optional[float] = Field(default=None, ge=-90, le=90)
    last_location_lon: Optional[float] = Field(default=None, ge=-180, le=180)
    last_location_updated: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def last_location(self) -> Optional[GeoPoint]:
        return GeoPoint.from_optional(self.last_location_lat, self.last_location_lon)


class UserInput(BaseModel):
    """Input model for user creation."""

    telegram_user_id: int = Field(gt=0)
    telegram_username: Optional[str] = None
    full_name: Optional[str] = None
    role: UserRole = UserRole.USER
