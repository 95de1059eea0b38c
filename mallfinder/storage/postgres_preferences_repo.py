"""PostgreSQL repository for notification preferences."""

from sqlalchemy import select

from mallfinder.logging import get_logger
from mallfinder.models.preferences import DEFAULT_RADIUS_KM, NotificationPreferences
from mallfinder.storage.database import Database
from mallfinder.storage.db_models import UserPreferencesTable

logger = get_logger(__name__)


class PostgresPreferencesRepository:
    """Stores one preferences row per user."""

    def __init__(self, db: Database):
        self.db = db

    async def get_or_create(
        self, user_id: int, default_radius_km: int = DEFAULT_RADIUS_KM
    ) -> NotificationPreferences:
        """Return the user's preferences, inserting defaults on first read."""
        async with self.db.session() as session:
            row = await self._get_row(session, user_id)
            if row is None:
                defaults = NotificationPreferences(notification_radius_km=default_radius_km)
                row = UserPreferencesTable(
                    user_id=user_id,
                    notifications_enabled=defaults.notifications_enabled,
                    notification_radius=defaults.notification_radius_km,
                )
                session.add(row)
                await session.flush()
                logger.info("preferences_created", user_id=user_id)

            return NotificationPreferences(
                notifications_enabled=row.notifications_enabled,
                notification_radius_km=row.notification_radius,
            )

    async def upsert(self, user_id: int, prefs: NotificationPreferences) -> NotificationPreferences:
        """Insert or update the user's preferences."""
        async with self.db.session() as session:
            row = await self._get_row(session, user_id)
            if row is None:
                row = UserPreferencesTable(user_id=user_id)
                session.add(row)

            row.notifications_enabled = prefs.notifications_enabled
            row.notification_radius = prefs.notification_radius_km
            await session.flush()

            logger.info(
                "preferences_saved",
                user_id=user_id,
                enabled=prefs.notifications_enabled,
                radius_km=prefs.notification_radius_km,
            )

            return prefs

    async def _get_row(self, session, user_id: int) -> UserPreferencesTable | None:
        stmt = select(UserPreferencesTable).where(UserPreferencesTable.user_id == user_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
