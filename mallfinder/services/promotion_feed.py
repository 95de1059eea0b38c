"""Promotion feed: active promotions ranked around the user."""

from datetime import datetime
from typing import Optional

from mallfinder.logging import get_logger
from mallfinder.models.geo import GeoPoint
from mallfinder.models.promotion import PromotionVenue
from mallfinder.models.ranking import RankedResult, RankingQuery
from mallfinder.services.proximity_ranking import ProximityRankingService
from mallfinder.storage.postgres_promotion_repo import PostgresPromotionRepository

logger = get_logger(__name__)


class PromotionFeedService:
    """Builds the promotions list and the home-screen highlights."""

    def __init__(
        self,
        promotion_repo: PostgresPromotionRepository,
        ranking: ProximityRankingService,
        radius_km: float = 100.0,
        highlights_limit: int = 5,
    ):
        self.promotion_repo = promotion_repo
        self.ranking = ranking
        self.radius_km = radius_km
        self.highlights_limit = highlights_limit

    async def active_promotions(self, now: Optional[datetime] = None) -> list[PromotionVenue]:
        """Promotions whose end date is strictly after now."""
        now = now or datetime.utcnow()
        venues = await self.promotion_repo.list_active(now)
        return [v for v in venues if v.promotion.is_active(now)]

    async def promotions_near(
        self,
        origin: GeoPoint,
        text_query: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> list[RankedResult[PromotionVenue]]:
        """Active promotions within the feed radius, nearest first."""
        candidates = await self.active_promotions(now)
        report = self.ranking.rank_with_report(
            origin,
            candidates,
            RankingQuery(radius_km=self.radius_km, text_query=text_query),
        )

        logger.info(
            "promotions_ranked",
            candidates=len(candidates),
            results=len(report.results),
            skipped=len(report.skipped_ids),
            radius_km=self.radius_km,
        )

        return report.results

    async def highlights(
        self, origin: GeoPoint, now: Optional[datetime] = None
    ) -> list[RankedResult[PromotionVenue]]:
        """The nearest few active promotions, at any distance."""
        candidates = await self.active_promotions(now)
        return self.ranking.rank(
            origin, candidates, RankingQuery(limit=self.highlights_limit)
        )
