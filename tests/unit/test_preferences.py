"""Unit tests for notification preferences."""

from unittest.mock import AsyncMock

import pytest

from mallfinder.models.preferences import NotificationPreferences
from mallfinder.models.user import User
from mallfinder.security.session import SessionContext
from mallfinder.services.preferences import (
    LOCAL_PREFERENCES_KEY,
    DatabasePreferenceStore,
    LocalPreferenceStore,
    PreferenceService,
)


@pytest.fixture
def repo():
    repo = AsyncMock()
    repo.get_or_create = AsyncMock(return_value=NotificationPreferences())
    repo.upsert = AsyncMock(side_effect=lambda user_id, prefs: prefs)
    return repo


def test_store_for_registered_user_uses_database(repo):
    service = PreferenceService(repo)
    session = SessionContext(telegram_user_id=1, user=User(id=7, telegram_user_id=1))

    store = service.store_for(session, {})

    assert isinstance(store, DatabasePreferenceStore)
    assert store.user_id == 7


def test_store_for_guest_uses_local_storage(repo):
    service = PreferenceService(repo)

    store = service.store_for(SessionContext(telegram_user_id=1), {})

    assert isinstance(store, LocalPreferenceStore)


@pytest.mark.asyncio
async def test_local_store_defaults_then_persists(repo):
    storage = {}
    service = PreferenceService(repo, default_radius_km=10)
    store = service.store_for(SessionContext(telegram_user_id=1), storage)

    prefs = await service.get(store)
    assert prefs == NotificationPreferences(notifications_enabled=False, notification_radius_km=10)

    await service.set_enabled(store, True)
    await service.set_radius(store, 25)

    assert storage[LOCAL_PREFERENCES_KEY] == {"notifications_enabled": True, "notification_radius_km": 25}
    assert (await service.get(store)).notification_radius_km == 25
    repo.upsert.assert_not_awaited()


@pytest.mark.asyncio
async def test_database_store_round_trip(repo):
    service = PreferenceService(repo)
    store = DatabasePreferenceStore(repo, user_id=7)

    prefs = await service.set_enabled(store, True)

    assert prefs.notifications_enabled is True
    repo.get_or_create.assert_awaited_with(7, 4)
    saved_user_id, saved = repo.upsert.await_args.args
    assert saved_user_id == 7
    assert saved.notifications_enabled is True
    assert saved.notification_radius_km == 4


@pytest.mark.asyncio
@pytest.mark.parametrize("radius", [0, 51, -3])
async def test_set_radius_rejects_out_of_range(repo, radius):
    service = PreferenceService(repo)
    store = LocalPreferenceStore({}, 4)

    with pytest.raises(ValueError):
        await service.set_radius(store, radius)


@pytest.mark.asyncio
@pytest.mark.parametrize("radius", [1, 50])
async def test_set_radius_accepts_bounds(repo, radius):
    service = PreferenceService(repo)
    store = LocalPreferenceStore({}, 4)

    prefs = await service.set_radius(store, radius)

    assert prefs.notification_radius_km == radius


@pytest.mark.asyncio
async def test_registered_user_gets_configured_default_radius(repo):
    service = PreferenceService(repo, default_radius_km=10)
    session = SessionContext(telegram_user_id=1, user=User(id=7, telegram_user_id=1))

    await service.get(service.store_for(session, {}))

    repo.get_or_create.assert_awaited_once_with(7, 10)


@pytest.mark.asyncio
async def test_adopt_local_moves_guest_preferences_to_account(repo):
    storage = {LOCAL_PREFERENCES_KEY: {"notifications_enabled": True, "notification_radius_km": 25}}
    service = PreferenceService(repo, default_radius_km=10)

    moved = await service.adopt_local(7, storage)

    assert moved is True
    repo.upsert.assert_awaited_once_with(
        7, NotificationPreferences(notifications_enabled=True, notification_radius_km=25)
    )
    assert LOCAL_PREFERENCES_KEY not in storage


@pytest.mark.asyncio
async def test_adopt_local_without_guest_preferences_is_noop(repo):
    service = PreferenceService(repo)

    assert await service.adopt_local(7, {}) is False
    repo.upsert.assert_not_awaited()
