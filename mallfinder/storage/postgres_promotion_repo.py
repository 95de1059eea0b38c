"""PostgreSQL repository for promotions."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from mallfinder.logging import get_logger
from mallfinder.models.promotion import Promotion, PromotionInput, PromotionVenue
from mallfinder.storage.database import Database
from mallfinder.storage.db_models import PromotionTable, StoreTable
from mallfinder.storage.postgres_mall_repo import mall_from_row
from mallfinder.storage.postgres_store_repo import store_from_row
from mallfinder.storage.repository_base import RepositoryBase

logger = get_logger(__name__)


def promotion_from_row(db_promotion: PromotionTable) -> Promotion:
    """Convert database row to domain model."""
    return Promotion(
        id=db_promotion.id,
        store_id=db_promotion.store_id,
        title=db_promotion.title,
        description=db_promotion.description or "",
        promotion_type=db_promotion.promotion_type,
        start_date=db_promotion.start_date,
        end_date=db_promotion.end_date,
        image=db_promotion.image,
        favorites=db_promotion.favorites or 0,
        created_at=db_promotion.created_at,
    )


class PostgresPromotionRepository(RepositoryBase[Promotion]):
    """Promotion repository using PostgreSQL."""

    def __init__(self, db: Database):
        self.db = db

    async def get_by_id(self, id: UUID) -> Optional[Promotion]:
        """Retrieve promotion by ID."""
        async with self.db.session() as session:
            db_promotion = await session.get(PromotionTable, id)
            return promotion_from_row(db_promotion) if db_promotion else None

    async def list_active(self, now: Optional[datetime] = None) -> list[PromotionVenue]:
        """Promotions ending strictly after now, joined with store and mall."""
        now = now or datetime.utcnow()
        async with self.db.session() as session:
            stmt = (
                select(PromotionTable)
                .options(selectinload(PromotionTable.store).selectinload(StoreTable.mall))
                .where(PromotionTable.end_date > now)
                .order_by(PromotionTable.end_date.asc())
            )
            result = await session.execute(stmt)
            venues = []
            for row in result.scalars().all():
                store = row.store
                mall = store.mall if store is not None else None
                venues.append(
                    PromotionVenue(
                        promotion=promotion_from_row(row),
                        store=store_from_row(store) if store is not None else None,
                        mall=mall_from_row(mall) if mall is not None else None,
                    )
                )
            return venues

    async def list_active_by_store(
        self, store_id: UUID, now: Optional[datetime] = None
    ) -> list[Promotion]:
        """Active promotions of one store, soonest ending first."""
        now = now or datetime.utcnow()
        async with self.db.session() as session:
            stmt = (
                select(PromotionTable)
                .where(PromotionTable.store_id == store_id)
                .where(PromotionTable.end_date > now)
                .order_by(PromotionTable.end_date.asc())
            )
            result = await session.execute(stmt)
            return [promotion_from_row(row) for row in result.scalars().all()]

    async def list_by_stores(self, store_ids: list[UUID]) -> dict[UUID, list[Promotion]]:
        """Every promotion of the given stores, expired ones included, soonest ending first."""
        grouped: dict[UUID, list[Promotion]] = {store_id: [] for store_id in store_ids}
        if not store_ids:
            return grouped

        async with self.db.session() as session:
            stmt = (
                select(PromotionTable)
                .where(PromotionTable.store_id.in_(store_ids))
                .order_by(PromotionTable.end_date.asc())
            )
            result = await session.execute(stmt)
            for row in result.scalars().all():
                grouped[row.store_id].append(promotion_from_row(row))
        return grouped

    async def count_active_by_store(
        self, store_ids: list[UUID], now: Optional[datetime] = None
    ) -> dict[UUID, int]:
        """Active promotion count per store; stores without any map to 0."""
        counts = {store_id: 0 for store_id in store_ids}
        if not store_ids:
            return counts

        now = now or datetime.utcnow()
        async with self.db.session() as session:
            stmt = (
                select(PromotionTable.store_id, func.count(PromotionTable.id))
                .where(PromotionTable.store_id.in_(store_ids))
                .where(PromotionTable.end_date > now)
                .group_by(PromotionTable.store_id)
            )
            result = await session.execute(stmt)
            for store_id, count in result.all():
                counts[store_id] = count
        return counts

    async def create(self, entity: PromotionInput, created_by: Optional[int] = None) -> Promotion:
        """Create new promotion."""
        async with self.db.session() as session:
            db_promotion = PromotionTable(
                store_id=entity.store_id,
                title=entity.title,
                description=entity.description,
                promotion_type=entity.promotion_type,
                start_date=entity.start_date,
                end_date=entity.end_date,
                image=entity.image,
                user_id=created_by,
            )
            session.add(db_promotion)
            await session.flush()

            logger.info(
                "promotion_created",
                promotion_id=str(db_promotion.id),
                store_id=str(entity.store_id),
                end_date=entity.end_date.isoformat(),
            )

            return promotion_from_row(db_promotion)

    async def update(self, entity: Promotion) -> Promotion:
        """Update existing promotion."""
        async with self.db.session() as session:
            db_promotion = await session.get(PromotionTable, entity.id)
            if not db_promotion:
                raise ValueError(f"Promotion not found: {entity.id}")

            db_promotion.store_id = entity.store_id
            db_promotion.title = entity.title
            db_promotion.description = entity.description
            db_promotion.promotion_type = entity.promotion_type
            db_promotion.start_date = entity.start_date
            db_promotion.end_date = entity.end_date
            db_promotion.image = entity.image
            await session.flush()

            logger.info("promotion_updated", promotion_id=str(entity.id))

            return promotion_from_row(db_promotion)

    async def delete(self, id: UUID) -> bool:
        """Delete promotion by ID."""
        async with self.db.session() as session:
            db_promotion = await session.get(PromotionTable, id)
            if not db_promotion:
                return False

            await session.delete(db_promotion)
            await session.flush()

            logger.info("promotion_deleted", promotion_id=str(id))

            return True
