"""PostgreSQL repository for stores and categories."""

from typing import Optional
from uuid import UUID

from sqlalchemy import func, select

from mallfinder.logging import get_logger
from mallfinder.models.store import Category, Store, StoreInput
from mallfinder.storage.database import Database
from mallfinder.storage.db_models import CategoryTable, StoreTable
from mallfinder.storage.repository_base import RepositoryBase

logger = get_logger(__name__)


def store_from_row(db_store: StoreTable) -> Store:
    """Convert database row to domain model."""
    return Store(
        id=db_store.id,
        mall_id=db_store.mall_id,
        name=db_store.name,
        description=db_store.description,
        floor=db_store.floor,
        location_in_mall=db_store.location_in_mall,
        contact_number=db_store.contact_number,
        logo_url=db_store.logo_url,
        hours=db_store.hours,
        categories=[str(c) for c in (db_store.array_categories or [])],
        created_at=db_store.created_at,
    )


class PostgresStoreRepository(RepositoryBase[Store]):
    """Store repository using PostgreSQL."""

    def __init__(self, db: Database):
        self.db = db

    async def get_by_id(self, id: UUID) -> Optional[Store]:
        """Retrieve store by ID."""
        async with self.db.session() as session:
            db_store = await session.get(StoreTable, id)
            return store_from_row(db_store) if db_store else None

    async def list_by_mall(self, mall_id: UUID) -> list[Store]:
        """Stores of a mall, ordered by name."""
        async with self.db.session() as session:
            stmt = (
                select(StoreTable)
                .where(StoreTable.mall_id == mall_id)
                .order_by(StoreTable.name.asc())
            )
            result = await session.execute(stmt)
            return [store_from_row(row) for row in result.scalars().all()]

    async def count_by_mall(self, mall_ids: list[UUID]) -> dict[UUID, int]:
        """Number of stores per mall; malls without stores map to 0."""
        counts = {mall_id: 0 for mall_id in mall_ids}
        if not mall_ids:
            return counts

        async with self.db.session() as session:
            stmt = (
                select(StoreTable.mall_id, func.count(StoreTable.id))
                .where(StoreTable.mall_id.in_(mall_ids))
                .group_by(StoreTable.mall_id)
            )
            result = await session.execute(stmt)
            for mall_id, count in result.all():
                counts[mall_id] = count
        return counts

    async def create(self, entity: StoreInput, created_by: Optional[int] = None) -> Store:
        """Create new store."""
        async with self.db.session() as session:
            db_store = StoreTable(
                mall_id=entity.mall_id,
                name=entity.name,
                description=entity.description,
                floor=entity.floor,
                location_in_mall=entity.location_in_mall,
                contact_number=entity.contact_number,
                logo_url=entity.logo_url,
                hours=entity.hours,
                array_categories=list(entity.categories),
                user_id=created_by,
            )
            session.add(db_store)
            await session.flush()

            logger.info(
                "store_created",
                store_id=str(db_store.id),
                mall_id=str(entity.mall_id),
                name=entity.name,
            )

            return store_from_row(db_store)

    async def update(self, entity: Store) -> Store:
        """Update existing store."""
        async with self.db.session() as session:
            db_store = await session.get(StoreTable, entity.id)
            if not db_store:
                raise ValueError(f"Store not found: {entity.id}")

            db_store.mall_id = entity.mall_id
            db_store.name = entity.name
            db_store.description = entity.description
            db_store.floor = entity.floor
            db_store.location_in_mall = entity.location_in_mall
            db_store.contact_number = entity.contact_number
            db_store.logo_url = entity.logo_url
            db_store.hours = entity.hours
            db_store.array_categories = list(entity.categories)
            await session.flush()

            logger.info("store_updated", store_id=str(entity.id))

            return store_from_row(db_store)

    async def delete(self, id: UUID) -> bool:
        """Delete store by ID."""
        async with self.db.session() as session:
            db_store = await session.get(StoreTable, id)
            if not db_store:
                return False

            await session.delete(db_store)
            await session.flush()

            logger.info("store_deleted", store_id=str(id))

            return True

    async def list_categories(self) -> list[Category]:
        """All categories ordered by name."""
        async with self.db.session() as session:
            result = await session.execute(select(CategoryTable).order_by(CategoryTable.name.asc()))
            return [Category(id=row.id, name=row.name) for row in result.scalars().all()]

