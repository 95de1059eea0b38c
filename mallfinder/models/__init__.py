"""Models package - domain models and value objects."""

from .geo import GeoPoint, HasCategories, HasLocation, InvalidCoordinate
from .mall import Mall, MallInput
from .preferences import NotificationPreferences
from .promotion import Promotion, PromotionInput, PromotionVenue
from .ranking import RankedResult, RankingQuery, RankingReport
from .store import Category, Store, StoreInput, StoreVenue
from .user import User, UserInput, UserRole

__all__ = [
    "GeoPoint",
    "HasCategories",
    "HasLocation",
    "InvalidCoordinate",
    "Mall",
    "MallInput",
    "NotificationPreferences",
    "Promotion",
    "PromotionInput",
    "PromotionVenue",
    "RankedResult",
    "RankingQuery",
    "RankingReport",
    "Category",
    "Store",
    "StoreInput",
    "StoreVenue",
    "User",
    "UserInput",
    "UserRole",
]
