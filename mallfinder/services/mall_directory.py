"""Mall directory: nearby malls, mall detail and store detail."""

from dataclasses import dataclass, field
from datetime import datetime
from math import ceil
from typing import Optional
from uuid import UUID

from mallfinder.logging import get_logger
from mallfinder.models.geo import GeoPoint, InvalidCoordinate
from mallfinder.models.mall import Mall
from mallfinder.models.promotion import Promotion
from mallfinder.models.ranking import RankedResult, RankingQuery
from mallfinder.models.store import Category, Store, StoreVenue
from mallfinder.services.distance import haversine_km
from mallfinder.services.proximity_ranking import ProximityRankingService
from mallfinder.storage.postgres_mall_repo import PostgresMallRepository
from mallfinder.storage.postgres_promotion_repo import PostgresPromotionRepository
from mallfinder.storage.postgres_store_repo import PostgresStoreRepository

logger = get_logger(__name__)


@dataclass
class MallPage:
    """One page of malls ranked by distance."""

    results: list[RankedResult[Mall]]
    store_counts: dict[UUID, int]
    page: int
    total: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return max(1, ceil(self.total / self.page_size))

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages - 1


@dataclass
class MallDetail:
    """A mall with its (filtered) stores and the category list."""

    mall: Mall
    stores: list[StoreVenue]
    categories: list[Category]
    total_stores: int
    distance_km: Optional[float] = None
    selected_category: Optional[str] = None

    def category_names(self, store: Store) -> str:
        names = {str(c.id): c.name for c in self.categories}
        return ", ".join(names[c] for c in store.categories if c in names)


@dataclass
class StoreDetail:
    store: Store
    mall: Optional[Mall]
    promotions: list[Promotion] = field(default_factory=list)


class MallDirectoryService:
    """Read-side queries behind the mall screens."""

    def __init__(
        self,
        mall_repo: PostgresMallRepository,
        store_repo: PostgresStoreRepository,
        promotion_repo: PostgresPromotionRepository,
        ranking: ProximityRankingService,
        page_size: int = 10,
    ):
        self.mall_repo = mall_repo
        self.store_repo = store_repo
        self.promotion_repo = promotion_repo
        self.ranking = ranking
        self.page_size = page_size

    async def nearby_malls(
        self,
        origin: GeoPoint,
        text_query: Optional[str] = None,
        page: int = 0,
    ) -> MallPage:
        """Malls nearest first, with no distance cutoff, paged in memory."""
        malls = await self.mall_repo.list_all()
        report = self.ranking.rank_with_report(
            origin, malls, RankingQuery(text_query=text_query)
        )

        total = len(report.results)
        start = max(page, 0) * self.page_size
        page_results = report.results[start : start + self.page_size]
        store_counts = await self.store_repo.count_by_mall([r.item.id for r in page_results])

        logger.info(
            "malls_ranked",
            total=total,
            skipped=len(report.skipped_ids),
            page=page,
            has_query=bool(text_query),
        )

        return MallPage(
            results=page_results,
            store_counts=store_counts,
            page=page,
            total=total,
            page_size=self.page_size,
        )

    async def mall_detail(
        self,
        mall_id: UUID,
        origin: Optional[GeoPoint] = None,
        category: Optional[str] = None,
        text_query: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Optional[MallDetail]:
        """Mall with its stores filtered by category and text, in name order."""
        mall = await self.mall_repo.get_by_id(mall_id)
        if mall is None:
            return None

        stores = await self.store_repo.list_by_mall(mall_id)
        promo_counts = await self.promotion_repo.count_active_by_store(
            [s.id for s in stores], now
        )
        venues = [
            StoreVenue(store=s, mall=mall, active_promotions_count=promo_counts.get(s.id, 0))
            for s in stores
        ]
        filtered = self.ranking.filter(
            venues, RankingQuery(text_query=text_query, category=category)
        )
        categories = await self.store_repo.list_categories()

        distance = None
        if origin is not None:
            try:
                location = mall.location
            except InvalidCoordinate:
                location = None
            if location is not None:
                distance = haversine_km(origin, location)

        return MallDetail(
            mall=mall,
            stores=filtered,
            categories=categories,
            total_stores=len(stores),
            distance_km=distance,
            selected_category=category,
        )

    async def store_detail(self, store_id: UUID, now: Optional[datetime] = None) -> Optional[StoreDetail]:
        store = await self.store_repo.get_by_id(store_id)
        if store is None:
            return None

        mall = await self.mall_repo.get_by_id(store.mall_id) if store.mall_id else None
        promotions = await self.promotion_repo.list_active_by_store(store_id, now)
        return StoreDetail(store=store, mall=mall, promotions=promotions)
