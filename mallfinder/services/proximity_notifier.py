"""Background proximity check: tell users about malls close to their last
known location.

Uses the same ranking service and distance function as the foreground
mall listing, so an alert and the in-app distance always agree.
"""

from typing import Protocol

from mallfinder.logging import get_logger
from mallfinder.models.mall import Mall
from mallfinder.models.ranking import RankedResult, RankingQuery
from mallfinder.models.user import User
from mallfinder.services.proximity_ranking import ProximityRankingService
from mallfinder.storage.postgres_mall_repo import PostgresMallRepository
from mallfinder.storage.postgres_user_repo import PostgresUserRepository
from mallfinder.storage.redis_cooldowns import RedisCooldownStore

logger = get_logger(__name__)


class NotificationSender(Protocol):
    """Delivers one "mall nearby" alert to a user."""

    async def send(self, user: User, result: RankedResult[Mall]) -> None: ...


class ProximityNotifier:
    """Runs one notification cycle over every opted-in user."""

    def __init__(
        self,
        user_repo: PostgresUserRepository,
        mall_repo: PostgresMallRepository,
        cooldowns: RedisCooldownStore,
        sender: NotificationSender,
        ranking: ProximityRankingService,
    ):
        self.user_repo = user_repo
        self.mall_repo = mall_repo
        self.cooldowns = cooldowns
        self.sender = sender
        self.ranking = ranking

    async def run_cycle(self) -> dict[str, int]:
        """
        Check every opted-in user against all malls.

        Returns:
            Counts: {"users", "notified", "suppressed", "failed"}
        """
        counts = {"users": 0, "notified": 0, "suppressed": 0, "failed": 0}

        targets = await self.user_repo.list_notification_targets()
        if not targets:
            logger.info("proximity_cycle_completed", **counts)
            return counts

        malls = await self.mall_repo.list_all()

        for user, radius_km in targets:
            counts["users"] += 1
            origin = user.last_location
            if origin is None:
                continue

            nearby = self.ranking.rank(origin, malls, RankingQuery(radius_km=radius_km))
            for result in nearby:
                outcome = await self._notify(user, result)
                counts[outcome] += 1

        logger.info("proximity_cycle_completed", **counts)
        return counts

    async def _notify(self, user: User, result: RankedResult[Mall]) -> str:
        mall = result.item
        try:
            claimed = await self.cooldowns.try_claim(user.id, mall.id)
        except Exception as e:
            logger.error(
                "proximity_cooldown_failed",
                user_id=user.id,
                mall_id=str(mall.id),
                error=str(e),
            )
            return "failed"

        if not claimed:
            return "suppressed"

        try:
            await self.sender.send(user, result)
        except Exception as e:
            logger.error(
                "proximity_notification_failed",
                user_id=user.id,
                mall_id=str(mall.id),
                error=str(e),
                exc_info=True,
            )
            await self._release(user, mall)
            return "failed"

        logger.info(
            "proximity_notification_sent",
            user_id=user.id,
            mall_id=str(mall.id),
            distance_km=round(result.distance_km, 2),
        )
        return "notified"

    async def _release(self, user: User, mall: Mall) -> None:
        # a claim that cannot be released just expires with the cooldown window
        try:
            await self.cooldowns.release(user.id, mall.id)
        except Exception as e:
            logger.error(
                "proximity_cooldown_release_failed",
                user_id=user.id,
                mall_id=str(mall.id),
                error=str(e),
            )
