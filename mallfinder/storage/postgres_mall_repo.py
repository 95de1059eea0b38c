"""PostgreSQL repository for shopping malls."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select

from mallfinder.logging import get_logger
from mallfinder.models.mall import Mall, MallInput
from mallfinder.storage.database import Database
from mallfinder.storage.db_models import MallTable
from mallfinder.storage.repository_base import RepositoryBase

logger = get_logger(__name__)


def _to_float(value) -> Optional[float]:
    return float(value) if value is not None else None


def mall_from_row(db_mall: MallTable) -> Mall:
    """Convert database row to domain model."""
    return Mall(
        id=db_mall.id,
        name=db_mall.name,
        address=db_mall.address,
        description=db_mall.description,
        image=db_mall.image,
        latitude=_to_float(db_mall.latitude),
        longitude=_to_float(db_mall.longitude),
        created_at=db_mall.created_at,
    )


class PostgresMallRepository(RepositoryBase[Mall]):
    """Mall repository using PostgreSQL."""

    def __init__(self, db: Database):
        self.db = db

    async def get_by_id(self, id: UUID) -> Optional[Mall]:
        """Retrieve mall by ID."""
        async with self.db.session() as session:
            db_mall = await session.get(MallTable, id)
            return mall_from_row(db_mall) if db_mall else None

    async def list_all(self) -> list[Mall]:
        """All malls, ordered by name. Distance ordering happens in the ranking service."""
        async with self.db.session() as session:
            result = await session.execute(select(MallTable).order_by(MallTable.name))
            return [mall_from_row(row) for row in result.scalars().all()]

    async def create(self, entity: MallInput, created_by: Optional[int] = None) -> Mall:
        """Create new mall."""
        async with self.db.session() as session:
            db_mall = MallTable(
                name=entity.name,
                address=entity.address,
                description=entity.description,
                image=entity.image,
                latitude=entity.latitude,
                longitude=entity.longitude,
                user_id=created_by,
            )
            session.add(db_mall)
            await session.flush()

            logger.info("mall_created", mall_id=str(db_mall.id), name=entity.name)

            return mall_from_row(db_mall)

    async def update(self, entity: Mall) -> Mall:
        """Update existing mall."""
        async with self.db.session() as session:
            db_mall = await session.get(MallTable, entity.id)
            if not db_mall:
                raise ValueError(f"Mall not found: {entity.id}")

            db_mall.name = entity.name
            db_mall.address = entity.address
            db_mall.description = entity.description
            db_mall.image = entity.image
            db_mall.latitude = entity.latitude
            db_mall.longitude = entity.longitude
            await session.flush()

            logger.info("mall_updated", mall_id=str(entity.id))

            return mall_from_row(db_mall)

    async def delete(self, id: UUID) -> bool:
        """Delete mall by ID. Its stores and their promotions cascade."""
        async with self.db.session() as session:
            db_mall = await session.get(MallTable, id)
            if not db_mall:
                return False

            await session.delete(db_mall)
            await session.flush()

            logger.info("mall_deleted", mall_id=str(id))

            return True

