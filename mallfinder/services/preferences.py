"""Notification preferences, stored remotely for registered users and
locally (per chat) otherwise."""

from typing import MutableMapping, Protocol

from mallfinder.logging import get_logger
from mallfinder.models.preferences import (
    DEFAULT_RADIUS_KM,
    MAX_RADIUS_KM,
    MIN_RADIUS_KM,
    NotificationPreferences,
)
from mallfinder.security.session import SessionContext
from mallfinder.storage.postgres_preferences_repo import PostgresPreferencesRepository

logger = get_logger(__name__)

LOCAL_PREFERENCES_KEY = "notification_preferences"


class PreferenceStore(Protocol):
    async def load(self) -> NotificationPreferences: ...

    async def save(self, prefs: NotificationPreferences) -> NotificationPreferences: ...


class DatabasePreferenceStore:
    """Preferences of a registered user."""

    def __init__(
        self,
        repo: PostgresPreferencesRepository,
        user_id: int,
        default_radius_km: int = DEFAULT_RADIUS_KM,
    ):
        self.repo = repo
        self.user_id = user_id
        self.default_radius_km = default_radius_km

    async def load(self) -> NotificationPreferences:
        return await self.repo.get_or_create(self.user_id, self.default_radius_km)

    async def save(self, prefs: NotificationPreferences) -> NotificationPreferences:
        return await self.repo.upsert(self.user_id, prefs)


class LocalPreferenceStore:
    """Preferences kept in the chat's own storage (e.g. ``context.user_data``)."""

    def __init__(self, storage: MutableMapping, default_radius_km: int):
        self.storage = storage
        self.default_radius_km = default_radius_km

    async def load(self) -> NotificationPreferences:
        raw = self.storage.get(LOCAL_PREFERENCES_KEY)
        if raw is None:
            return NotificationPreferences(notification_radius_km=self.default_radius_km)
        return NotificationPreferences.model_validate(raw)

    async def save(self, prefs: NotificationPreferences) -> NotificationPreferences:
        self.storage[LOCAL_PREFERENCES_KEY] = prefs.model_dump()
        return prefs


class PreferenceService:
    """Reads and changes notification preferences."""

    def __init__(self, repo: PostgresPreferencesRepository, default_radius_km: int = DEFAULT_RADIUS_KM):
        self.repo = repo
        self.default_radius_km = default_radius_km

    def store_for(self, session: SessionContext, local_storage: MutableMapping) -> PreferenceStore:
        """Pick the backing store for whoever is acting."""
        if session.user_id is not None:
            return DatabasePreferenceStore(self.repo, session.user_id, self.default_radius_km)
        return LocalPreferenceStore(local_storage, self.default_radius_km)

    async def get(self, store: PreferenceStore) -> NotificationPreferences:
        return await store.load()

    async def set_enabled(self, store: PreferenceStore, enabled: bool) -> NotificationPreferences:
        prefs = await store.load()
        updated = prefs.model_copy(update={"notifications_enabled": enabled})
        logger.info("notifications_toggled", enabled=enabled)
        return await store.save(updated)

    async def set_radius(self, store: PreferenceStore, radius_km: int) -> NotificationPreferences:
        """Change the notification radius.

        Raises:
            ValueError: if the radius is outside 1-50 km
        """
        if not MIN_RADIUS_KM <= radius_km <= MAX_RADIUS_KM:
            raise ValueError(
                f"notification radius must be between {MIN_RADIUS_KM} and {MAX_RADIUS_KM} km"
            )
        prefs = await store.load()
        updated = prefs.model_copy(update={"notification_radius_km": radius_km})
        logger.info("notification_radius_changed", radius_km=radius_km)
        return await store.save(updated)

    async def adopt_local(self, user_id: int, local_storage: MutableMapping) -> bool:
        """Move preferences chosen as a guest onto a newly registered account.

        Returns:
            True if there was anything to move
        """
        if LOCAL_PREFERENCES_KEY not in local_storage:
            return False

        prefs = await LocalPreferenceStore(local_storage, self.default_radius_km).load()
        await DatabasePreferenceStore(self.repo, user_id, self.default_radius_km).save(prefs)
        del local_storage[LOCAL_PREFERENCES_KEY]

        logger.info("guest_preferences_adopted", user_id=user_id)
        return True
