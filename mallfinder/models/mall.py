"""Shopping mall domain models."""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from .geo import GeoPoint


class Mall(BaseModel):
    """Shopping mall entity.

    Coordinates are stored as read from the database and only validated
    when the location is requested, so that one bad row can be skipped
    instead of failing a whole listing.
    """

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1, max_length=200)
    address: str = Field(default="", max_length=300)
    description: Optional[str] = None
    image: Optional[str] = Field(default=None, max_length=500)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def location(self) -> Optional[GeoPoint]:
        return GeoPoint.from_optional(self.latitude, self.longitude)

    @property
    def searchable_text(self) -> str:
        return f"{self.name} {self.address}"


class MallInput(BaseModel):
    """Input model for mall creation and edits."""

    name: str = Field(min_length=1, max_length=200)
    address: str = Field(min_length=1, max_length=300)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    description: Optional[str] = None
    image: Optional[str] = Field(default=None, max_length=500)
