"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, Mock

import pytest

from mallfinder.models.geo import GeoPoint
from mallfinder.models.mall import Mall
from mallfinder.models.promotion import Promotion, PromotionVenue
from mallfinder.models.store import Store

# Zócalo, Mexico City
ORIGIN = GeoPoint(19.4326, -99.1332)


def make_mall(name="Plaza Norte", lat_offset=0.0, lon_offset=0.0, address="Av. Insurgentes 1"):
    """Mall placed relative to ORIGIN (0.01 degrees of latitude is about 1.1 km)."""
    return Mall(
        name=name,
        address=address,
        latitude=ORIGIN.latitude + lat_offset,
        longitude=ORIGIN.longitude + lon_offset,
    )


def make_promotion_venue(title="2x1 en jeans", mall=None, store_name="Levi's", days_left=7, now=None):
    now = now or datetime.utcnow()
    mall = mall or make_mall()
    store = Store(mall_id=mall.id, name=store_name)
    promotion = Promotion(
        store_id=store.id,
        title=title,
        description="Solo este fin de semana",
        end_date=now + timedelta(days=days_left),
    )
    return PromotionVenue(promotion=promotion, store=store, mall=mall)


@pytest.fixture
def origin():
    return ORIGIN


@pytest.fixture
def mock_redis():
    """Mock async Redis client fixture."""
    client = AsyncMock()
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.exists = AsyncMock(return_value=0)
    return client


@pytest.fixture
def mock_telegram_update():
    """Mock Telegram update fixture."""
    update = Mock()
    update.effective_user = Mock()
    update.effective_user.id = 12345
    update.effective_user.username = "testuser"
    update.effective_user.first_name = "Test"
    update.effective_user.full_name = "Test User"
    update.callback_query = None
    update.message = Mock()
    update.message.text = "/start"
    update.message.reply_text = AsyncMock()
    return update


@pytest.fixture
def mock_telegram_context():
    """Mock Telegram context fixture."""
    context = Mock()
    context.args = []
    context.bot_data = {}
    context.user_data = {}
    context.bot = Mock()
    return context
