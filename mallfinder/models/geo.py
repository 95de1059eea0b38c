"""Geographic value objects and location capabilities."""

import math
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable


class InvalidCoordinate(ValueError):
    """Raised when a latitude/longitude pair is outside the valid range."""

    def __init__(self, latitude: object, longitude: object):
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(f"Invalid coordinate: ({latitude}, {longitude})")


def _is_valid(value: object, bound: float) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and -bound <= value <= bound


@dataclass(frozen=True)
class GeoPoint:
    """Immutable WGS84 point in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (_is_valid(self.latitude, 90.0) and _is_valid(self.longitude, 180.0)):
            raise InvalidCoordinate(self.latitude, self.longitude)

    @classmethod
    def from_optional(
        cls, latitude: Optional[float], longitude: Optional[float]
    ) -> Optional["GeoPoint"]:
        """Build a point from nullable columns; None when either part is missing."""
        if latitude is None or longitude is None:
            return None
        return cls(float(latitude), float(longitude))


@runtime_checkable
class HasLocation(Protocol):
    """Anything that can be placed on the map and searched by text."""

    @property
    def id(self) -> object: ...

    @property
    def location(self) -> Optional[GeoPoint]:
        """Fixed venue location; may raise InvalidCoordinate when malformed."""
        ...

    @property
    def searchable_text(self) -> str: ...


@runtime_checkable
class HasCategories(Protocol):
    """Venue tagged with category identifiers."""

    @property
    def categories(self) -> frozenset[str]: ...
