"""Unit tests for proximity notifications."""

from unittest.mock import AsyncMock

import pytest

from conftest import ORIGIN, make_mall
from mallfinder.models.user import User
from mallfinder.services.proximity_notifier import ProximityNotifier
from mallfinder.services.proximity_ranking import ProximityRankingService


def make_user(user_id=1, telegram_user_id=1001, location=ORIGIN):
    return User(
        id=user_id,
        telegram_user_id=telegram_user_id,
        last_location_lat=location.latitude,
        last_location_lon=location.longitude,
    )


@pytest.fixture
def near_mall():
    return make_mall("Cerca", lat_offset=0.01)  # ~1.1 km


@pytest.fixture
def far_mall():
    return make_mall("Lejos", lat_offset=0.5)  # ~55 km


def make_notifier(targets, malls, claim=True):
    user_repo = AsyncMock()
    user_repo.list_notification_targets = AsyncMock(return_value=targets)
    mall_repo = AsyncMock()
    mall_repo.list_all = AsyncMock(return_value=malls)
    cooldowns = AsyncMock()
    cooldowns.try_claim = AsyncMock(return_value=claim)
    sender = AsyncMock()
    notifier = ProximityNotifier(user_repo, mall_repo, cooldowns, sender, ProximityRankingService())
    return notifier, cooldowns, sender, mall_repo


@pytest.mark.asyncio
async def test_notifies_malls_within_user_radius(near_mall, far_mall):
    user = make_user()
    notifier, cooldowns, sender, _ = make_notifier([(user, 4)], [far_mall, near_mall])

    counts = await notifier.run_cycle()

    assert counts == {"users": 1, "notified": 1, "suppressed": 0, "failed": 0}
    sender.send.assert_awaited_once()
    sent_user, result = sender.send.await_args.args
    assert sent_user == user
    assert result.item == near_mall
    cooldowns.try_claim.assert_awaited_once_with(user.id, near_mall.id)


@pytest.mark.asyncio
async def test_wider_radius_reaches_more_malls(near_mall, far_mall):
    notifier, _, sender, _ = make_notifier([(make_user(), 50)], [far_mall, near_mall])

    counts = await notifier.run_cycle()

    # 55 km mall is still outside 50 km
    assert counts["notified"] == 1


@pytest.mark.asyncio
async def test_cooldown_suppresses_repeat_notification(near_mall):
    notifier, _, sender, _ = make_notifier([(make_user(), 4)], [near_mall], claim=False)

    counts = await notifier.run_cycle()

    assert counts["suppressed"] == 1
    assert counts["notified"] == 0
    sender.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_failed_delivery_releases_claim(near_mall):
    user = make_user()
    notifier, cooldowns, sender, _ = make_notifier([(user, 4)], [near_mall])
    sender.send = AsyncMock(side_effect=RuntimeError("Forbidden: bot was blocked by the user"))

    counts = await notifier.run_cycle()

    assert counts["failed"] == 1
    cooldowns.release.assert_awaited_once_with(user.id, near_mall.id)


@pytest.mark.asyncio
async def test_one_failure_does_not_stop_other_users(near_mall):
    blocked, happy = make_user(1, 1001), make_user(2, 1002)
    notifier, _, sender, _ = make_notifier([(blocked, 4), (happy, 4)], [near_mall])
    sender.send = AsyncMock(side_effect=[RuntimeError("blocked"), None])

    counts = await notifier.run_cycle()

    assert counts == {"users": 2, "notified": 1, "suppressed": 0, "failed": 1}


@pytest.mark.asyncio
async def test_failed_release_does_not_stop_other_users(near_mall):
    blocked, happy = make_user(1, 1001), make_user(2, 1002)
    notifier, cooldowns, sender, _ = make_notifier([(blocked, 4), (happy, 4)], [near_mall])
    sender.send = AsyncMock(side_effect=[RuntimeError("blocked"), None])
    cooldowns.release = AsyncMock(side_effect=ConnectionError("redis down"))

    counts = await notifier.run_cycle()

    assert counts == {"users": 2, "notified": 1, "suppressed": 0, "failed": 1}
    assert sender.send.await_args.args[0] == happy


@pytest.mark.asyncio
async def test_cooldown_store_error_counts_as_failure(near_mall):
    notifier, cooldowns, sender, _ = make_notifier([(make_user(), 4)], [near_mall])
    cooldowns.try_claim = AsyncMock(side_effect=ConnectionError("redis down"))

    counts = await notifier.run_cycle()

    assert counts["failed"] == 1
    sender.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_no_targets_skips_mall_query():
    notifier, _, _, mall_repo = make_notifier([], [])

    counts = await notifier.run_cycle()

    assert counts["users"] == 0
    mall_repo.list_all.assert_not_awaited()
