"""Notification preference model."""

from pydantic import BaseModel, Field

MIN_RADIUS_KM = 1
MAX_RADIUS_KM = 50
DEFAULT_RADIUS_KM = 4


class NotificationPreferences(BaseModel):
    """Proximity notification preferences for one user."""

    notifications_enabled: bool = False
    notification_radius_km: int = Field(
        default=DEFAULT_RADIUS_KM, ge=MIN_RADIUS_KM, le=MAX_RADIUS_KM
    )
