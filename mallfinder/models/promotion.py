"""Promotion domain models."""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from .geo import GeoPoint
from .mall import Mall
from .store import Store


class Promotion(BaseModel):
    """Time-bounded promotion published by a store."""

    id: UUID = Field(default_factory=uuid4)
    store_id: Optional[UUID] = None
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=1000)
    promotion_type: Optional[str] = Field(default=None, max_length=50)
    start_date: Optional[datetime] = None
    end_date: datetime
    image: Optional[str] = Field(default=None, max_length=500)
    favorites: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    def is_active(self, now: Optional[datetime] = None) -> bool:
        """A promotion is active while its end date is strictly in the future."""
        return self.end_date > (now or datetime.utcnow())


class PromotionInput(BaseModel):
    """Input model for promotion creation."""

    store_id: UUID
    title: str = Field(min_length=3, max_length=200)
    description: str = Field(min_length=1, max_length=1000)
    promotion_type: Optional[str] = Field(default=None, max_length=50)
    start_date: Optional[datetime] = None
    end_date: datetime
    image: Optional[str] = Field(default=None, max_length=500)

    @field_validator("end_date")
    @classmethod
    def validate_date_range(cls, v: datetime, info) -> datetime:
        """Ensure start_date < end_date when a start is given."""
        start = info.data.get("start_date")
        if start is not None and v <= start:
            raise ValueError("end_date must be after start_date")
        return v


class PromotionVenue(BaseModel):
    """A promotion joined with its store and the store's mall."""

    promotion: Promotion
    store: Optional[Store] = None
    mall: Optional[Mall] = None

    @property
    def id(self) -> UUID:
        return self.promotion.id

    @property
    def location(self) -> Optional[GeoPoint]:
        if self.mall is None:
            return None
        return self.mall.location

    @property
    def store_name(self) -> str:
        return self.store.name if self.store else ""

    @property
    def mall_name(self) -> str:
        return self.mall.name if self.mall else ""

    @property
    def searchable_text(self) -> str:
        return (
            f"{self.promotion.title} {self.promotion.description} "
            f"{self.store_name} {self.mall_name}"
        )
