"""PostgreSQL repository for User entities."""

from datetime import datetime
from typing import Optional

from sqlalchemy import select

from mallfinder.logging import get_logger
from mallfinder.models.geo import GeoPoint
from mallfinder.models.user import User, UserInput
from mallfinder.storage.database import Database
from mallfinder.storage.db_models import UserPreferencesTable, UserTable
from mallfinder.storage.repository_base import RepositoryBase

logger = get_logger(__name__)


def user_from_row(db_user: UserTable) -> User:
    """Convert database row to domain model."""
    return User(
        id=db_user.id,
        telegram_user_id=db_user.telegram_user_id,
        telegram_username=db_user.telegram_username,
        full_name=db_user.full_name,
        role=db_user.role,
        last_location_lat=float(db_user.last_location_lat) if db_user.last_location_lat is not None else None,
        last_location_lon=float(db_user.last_location_lon) if db_user.last_location_lon is not None else None,
        last_location_updated=db_user.last_location_updated,
        created_at=db_user.created_at,
        updated_at=db_user.updated_at,
    )


class PostgresUserRepository(RepositoryBase[User]):
    """User repository using PostgreSQL."""

    def __init__(self, db: Database):
        self.db = db

    async def get_by_id(self, id: int) -> Optional[User]:
        """Retrieve user by ID."""
        async with self.db.session() as session:
            db_user = await session.get(UserTable, id)
            return user_from_row(db_user) if db_user else None

    async def get_by_telegram_id(self, telegram_user_id: int) -> Optional[User]:
        """Retrieve user by Telegram user ID."""
        async with self.db.session() as session:
            stmt = select(UserTable).where(UserTable.telegram_user_id == telegram_user_id)
            result = await session.execute(stmt)
            db_user = result.scalar_one_or_none()
            return user_from_row(db_user) if db_user else None

    async def create(self, entity: UserInput) -> User:
        """Create new user."""
        async with self.db.session() as session:
            db_user = UserTable(
                telegram_user_id=entity.telegram_user_id,
                telegram_username=entity.telegram_username,
                full_name=entity.full_name,
                role=entity.role,
            )
            session.add(db_user)
            await session.flush()

            logger.info(
                "user_created",
                user_id=db_user.id,
                telegram_user_id=entity.telegram_user_id,
                role=entity.role.value,
            )

            return user_from_row(db_user)

    async def update(self, entity: User) -> User:
        """Update existing user."""
        async with self.db.session() as session:
            db_user = await session.get(UserTable, entity.id)
            if not db_user:
                raise ValueError(f"User not found: {entity.id}")

            db_user.telegram_username = entity.telegram_username
            db_user.full_name = entity.full_name
            db_user.role = entity.role
            db_user.last_location_lat = entity.last_location_lat
            db_user.last_location_lon = entity.last_location_lon
            db_user.last_location_updated = entity.last_location_updated
            await session.flush()

            logger.info("user_updated", user_id=entity.id)

            return user_from_row(db_user)

    async def update_location(self, id: int, point: GeoPoint) -> User:
        """Store the user's latest location fix."""
        async with self.db.session() as session:
            db_user = await session.get(UserTable, id)
            if not db_user:
                raise ValueError(f"User not found: {id}")

            db_user.last_location_lat = point.latitude
            db_user.last_location_lon = point.longitude
            db_user.last_location_updated = datetime.utcnow()
            await session.flush()

            logger.info("user_location_updated", user_id=id)

            return user_from_row(db_user)

    async def delete(self, id: int) -> bool:
        """Delete user by ID."""
        async with self.db.session() as session:
            db_user = await session.get(UserTable, id)
            if not db_user:
                return False

            await session.delete(db_user)
            await session.flush()

            logger.info("user_deleted", user_id=id)

            return True

    async def list_notification_targets(self) -> list[tuple[User, int]]:
        """Users with notifications enabled and a known location, with their radius."""
        async with self.db.session() as session:
            stmt = (
                select(UserTable, UserPreferencesTable.notification_radius)
                .join(UserPreferencesTable, UserPreferencesTable.user_id == UserTable.id)
                .where(UserPreferencesTable.notifications_enabled.is_(True))
                .where(UserTable.last_location_lat.is_not(None))
                .where(UserTable.last_location_lon.is_not(None))
            )
            result = await session.execute(stmt)
            return [(user_from_row(db_user), radius) for db_user, radius in result.all()]
