"""Store and category domain models."""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from .geo import GeoPoint
from .mall import Mall


class Category(BaseModel):
    """Store category."""

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1, max_length=100)


class Store(BaseModel):
    """Store entity, located inside a mall."""

    id: UUID = Field(default_factory=uuid4)
    mall_id: Optional[UUID] = None
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    floor: Optional[str] = Field(default=None, max_length=50)
    location_in_mall: Optional[str] = Field(default=None, max_length=100)
    contact_number: Optional[str] = Field(default=None, max_length=30)
    logo_url: Optional[str] = Field(default=None, max_length=500)
    hours: Optional[str] = Field(default=None, max_length=200)
    categories: list[str] = Field(default_factory=list, description="Category IDs")
    created_at: datetime = Field(default_factory=datetime.utcnow)


class StoreInput(BaseModel):
    """Input model for store creation."""

    mall_id: UUID
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    floor: Optional[str] = Field(default=None, max_length=50)
    location_in_mall: Optional[str] = Field(default=None, max_length=100)
    contact_number: Optional[str] = Field(default=None, max_length=30)
    logo_url: Optional[str] = Field(default=None, max_length=500)
    hours: Optional[str] = Field(default=None, max_length=200)
    categories: list[str] = Field(default_factory=list)


class StoreVenue(BaseModel):
    """A store placed at its mall's location, for listings inside a mall."""

    store: Store
    mall: Mall
    active_promotions_count: int = Field(default=0, ge=0)

    @property
    def id(self) -> UUID:
        return self.store.id

    @property
    def location(self) -> Optional[GeoPoint]:
        return self.mall.location

    @property
    def searchable_text(self) -> str:
        return f"{self.store.name} {self.store.description or ''}"

    @property
    def categories(self) -> frozenset[str]:
        return frozenset(self.store.categories)
