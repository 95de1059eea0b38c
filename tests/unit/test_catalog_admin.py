"""Unit tests for admin catalog operations."""

from datetime import datetime
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from pydantic import ValidationError

from conftest import make_mall
from mallfinder.models.mall import MallInput
from mallfinder.models.promotion import Promotion, PromotionInput
from mallfinder.models.store import Category, Store, StoreInput
from mallfinder.models.user import User
from mallfinder.security.permissions import PermissionChecker, PermissionDenied
from mallfinder.security.session import SessionContext
from mallfinder.services.catalog_admin import CatalogAdminService, NotFoundError

ADMIN_ID = 111

ADMIN = SessionContext(telegram_user_id=ADMIN_ID, user=User(id=1, telegram_user_id=ADMIN_ID), is_admin=True)
VISITOR = SessionContext(telegram_user_id=222)


@pytest.fixture
def repos():
    return AsyncMock(), AsyncMock(), AsyncMock()


@pytest.fixture
def service(repos):
    return CatalogAdminService(*repos, PermissionChecker(admin_user_ids=[ADMIN_ID]))


def mall_input():
    return MallInput(name="Plaza Carso", address="Lago Zurich 245", latitude=19.44, longitude=-99.2)


@pytest.mark.asyncio
async def test_non_admin_cannot_create_mall(service, repos):
    mall_repo, _, _ = repos

    with pytest.raises(PermissionDenied):
        await service.create_mall(VISITOR, mall_input())

    mall_repo.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_admin_creates_mall(service, repos):
    mall_repo, _, _ = repos
    created = make_mall("Plaza Carso")
    mall_repo.create = AsyncMock(return_value=created)

    mall = await service.create_mall(ADMIN, mall_input())

    assert mall == created
    mall_repo.create.assert_awaited_once()
    assert mall_repo.create.await_args.kwargs["created_by"] == 1


@pytest.mark.asyncio
async def test_update_mall_applies_changes(service, repos):
    mall_repo, _, _ = repos
    mall = make_mall("Old name")
    mall_repo.get_by_id = AsyncMock(return_value=mall)
    mall_repo.update = AsyncMock(side_effect=lambda m: m)

    saved = await service.update_mall(ADMIN, mall.id, {"name": "New name", "latitude": 20.0})

    assert saved.name == "New name"
    assert saved.latitude == 20.0
    assert saved.id == mall.id
    assert saved.address == mall.address


@pytest.mark.asyncio
async def test_update_mall_rejects_unknown_fields(service, repos):
    with pytest.raises(ValueError, match="Unknown mall fields"):
        await service.update_mall(ADMIN, uuid4(), {"owner": "me"})


@pytest.mark.asyncio
async def test_update_mall_rejects_invalid_coordinates(service, repos):
    mall_repo, _, _ = repos
    mall = make_mall()
    mall_repo.get_by_id = AsyncMock(return_value=mall)

    with pytest.raises(ValidationError):
        await service.update_mall(ADMIN, mall.id, {"latitude": 123.0})

    mall_repo.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_missing_mall(service, repos):
    mall_repo, _, _ = repos
    mall_repo.get_by_id = AsyncMock(return_value=None)

    with pytest.raises(NotFoundError) as exc:
        await service.update_mall(ADMIN, uuid4(), {"name": "x"})
    assert exc.value.resource_type == "mall"


@pytest.mark.asyncio
async def test_delete_mall(service, repos):
    mall_repo, _, _ = repos
    mall = make_mall()
    mall_repo.get_by_id = AsyncMock(return_value=mall)
    mall_repo.delete = AsyncMock(return_value=True)

    assert await service.delete_mall(ADMIN, mall.id) is True
    mall_repo.delete.assert_awaited_once_with(mall.id)


@pytest.mark.asyncio
async def test_create_store_requires_existing_mall(service, repos):
    mall_repo, store_repo, _ = repos
    mall_repo.get_by_id = AsyncMock(return_value=None)

    with pytest.raises(NotFoundError):
        await service.create_store(ADMIN, StoreInput(mall_id=uuid4(), name="Zara"))

    store_repo.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_store(service, repos):
    mall_repo, store_repo, _ = repos
    mall = make_mall()
    mall_repo.get_by_id = AsyncMock(return_value=mall)
    store_repo.create = AsyncMock(return_value=Store(mall_id=mall.id, name="Zara"))

    store = await service.create_store(ADMIN, StoreInput(mall_id=mall.id, name="Zara"))

    assert store.name == "Zara"


@pytest.mark.asyncio
async def test_create_promotion_requires_existing_store(service, repos):
    _, store_repo, promotion_repo = repos
    store_repo.get_by_id = AsyncMock(return_value=None)
    data = PromotionInput(
        store_id=uuid4(), title="Buen Fin", description="Hasta 50%", end_date=datetime(2026, 11, 20)
    )

    with pytest.raises(NotFoundError):
        await service.create_promotion(ADMIN, data)

    promotion_repo.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_missing_promotion(service, repos):
    _, _, promotion_repo = repos
    promotion_repo.get_by_id = AsyncMock(return_value=None)

    with pytest.raises(NotFoundError):
        await service.delete_promotion(ADMIN, uuid4())


@pytest.mark.asyncio
async def test_delete_promotion(service, repos):
    _, _, promotion_repo = repos
    promotion = Promotion(title="Buen Fin", end_date=datetime(2026, 11, 20))
    promotion_repo.get_by_id = AsyncMock(return_value=promotion)
    promotion_repo.delete = AsyncMock(return_value=True)

    assert await service.delete_promotion(ADMIN, promotion.id)


@pytest.mark.asyncio
async def test_non_admin_cannot_delete_store(service, repos):
    _, store_repo, _ = repos

    with pytest.raises(PermissionDenied):
        await service.delete_store(VISITOR, uuid4())

    store_repo.get_by_id.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_store_applies_changes(service, repos):
    _, store_repo, _ = repos
    store = Store(mall_id=uuid4(), name="Zara", floor="PB", categories=["c1"])
    store_repo.get_by_id = AsyncMock(return_value=store)
    store_repo.update = AsyncMock(side_effect=lambda s: s)

    saved = await service.update_store(ADMIN, store.id, {"hours": "11:00-21:00", "categories": ["c2"]})

    assert saved.id == store.id
    assert saved.mall_id == store.mall_id
    assert saved.floor == "PB"
    assert saved.hours == "11:00-21:00"
    assert saved.categories == ["c2"]


@pytest.mark.asyncio
async def test_update_store_rejects_unknown_fields(service, repos):
    _, store_repo, _ = repos

    with pytest.raises(ValueError, match="Unknown store fields: mall_id"):
        await service.update_store(ADMIN, uuid4(), {"mall_id": str(uuid4())})

    store_repo.get_by_id.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_missing_store(service, repos):
    _, store_repo, _ = repos
    store_repo.get_by_id = AsyncMock(return_value=None)

    with pytest.raises(NotFoundError) as exc:
        await service.update_store(ADMIN, uuid4(), {"name": "x"})
    assert exc.value.resource_type == "store"


@pytest.mark.asyncio
async def test_update_promotion_moves_end_date(service, repos):
    _, _, promotion_repo = repos
    promotion = Promotion(
        store_id=uuid4(), title="Buen Fin", description="Hasta 50%", end_date=datetime(2026, 11, 20)
    )
    promotion_repo.get_by_id = AsyncMock(return_value=promotion)
    promotion_repo.update = AsyncMock(side_effect=lambda p: p)

    saved = await service.update_promotion(ADMIN, promotion.id, {"end_date": datetime(2026, 11, 30)})

    assert saved.id == promotion.id
    assert saved.title == "Buen Fin"
    assert saved.end_date == datetime(2026, 11, 30)


@pytest.mark.asyncio
async def test_update_promotion_keeps_end_after_start(service, repos):
    _, _, promotion_repo = repos
    promotion = Promotion(
        store_id=uuid4(),
        title="Buen Fin",
        description="Hasta 50%",
        start_date=datetime(2026, 11, 14),
        end_date=datetime(2026, 11, 20),
    )
    promotion_repo.get_by_id = AsyncMock(return_value=promotion)

    with pytest.raises(ValidationError):
        await service.update_promotion(ADMIN, promotion.id, {"end_date": datetime(2026, 11, 1)})

    promotion_repo.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_non_admin_cannot_update_promotion(service, repos):
    _, _, promotion_repo = repos

    with pytest.raises(PermissionDenied):
        await service.update_promotion(VISITOR, uuid4(), {"title": "Gratis"})

    promotion_repo.get_by_id.assert_not_awaited()


@pytest.mark.asyncio
async def test_overview_lists_malls_and_categories(service, repos):
    mall_repo, store_repo, _ = repos
    malls = [make_mall("Antara"), make_mall("Perisur")]
    categories = [Category(name="Moda")]
    mall_repo.list_all = AsyncMock(return_value=malls)
    store_repo.list_categories = AsyncMock(return_value=categories)

    overview = await service.overview(ADMIN)

    assert overview.malls == malls
    assert overview.categories == categories


@pytest.mark.asyncio
async def test_mall_inventory_groups_promotions_by_store(service, repos):
    mall_repo, store_repo, promotion_repo = repos
    mall = make_mall()
    stores = [Store(mall_id=mall.id, name="Liverpool"), Store(mall_id=mall.id, name="Zara")]
    promotion = Promotion(store_id=stores[0].id, title="Venta nocturna", end_date=datetime(2026, 5, 1))
    mall_repo.get_by_id = AsyncMock(return_value=mall)
    store_repo.list_by_mall = AsyncMock(return_value=stores)
    promotion_repo.list_by_stores = AsyncMock(
        return_value={stores[0].id: [promotion], stores[1].id: []}
    )

    inventory = await service.mall_inventory(ADMIN, mall.id)

    assert inventory.stores == stores
    assert inventory.promotions[stores[0].id] == [promotion]
    promotion_repo.list_by_stores.assert_awaited_once_with([s.id for s in stores])


@pytest.mark.asyncio
async def test_mall_inventory_missing_mall(service, repos):
    mall_repo, _, _ = repos
    mall_repo.get_by_id = AsyncMock(return_value=None)

    with pytest.raises(NotFoundError):
        await service.mall_inventory(ADMIN, uuid4())


@pytest.mark.asyncio
async def test_non_admin_cannot_list_catalog(service, repos):
    mall_repo, _, _ = repos

    with pytest.raises(PermissionDenied):
        await service.overview(VISITOR)

    mall_repo.list_all.assert_not_awaited()
