"""Contract tests for admin catalog commands."""

from datetime import datetime
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from conftest import make_mall
from mocks import MockContext, MockUpdate
from mallfinder.handlers.admin.catalog_handler import (
    MAX_MESSAGE_LENGTH,
    add_mall,
    add_promotion,
    catalog,
    delete_mall,
    edit_mall,
    edit_promotion,
    edit_store,
)
from mallfinder.models.promotion import Promotion
from mallfinder.models.store import Category, Store
from mallfinder.security.permissions import PermissionChecker
from mallfinder.services.catalog_admin import CatalogAdminService

ADMIN_ID = 12345


def admin_context(text, admin=True):
    context = MockContext(args=text.split(), admin_ids=[ADMIN_ID] if admin else [])
    mall_repo, store_repo, promotion_repo = AsyncMock(), AsyncMock(), AsyncMock()
    context.bot_data["catalog_admin"] = CatalogAdminService(
        mall_repo, store_repo, promotion_repo, PermissionChecker(admin_user_ids=[ADMIN_ID] if admin else [])
    )
    return context, mall_repo, store_repo, promotion_repo


@pytest.mark.asyncio
async def test_non_admin_is_refused():
    update = MockUpdate(text="/addmall A | B | 1 | 2")
    context, mall_repo, _, _ = admin_context("A | B | 1 | 2", admin=False)

    await add_mall(update, context)

    assert "permission" in update.message.reply_text.call_args[0][0]
    mall_repo.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_admin_adds_mall():
    args = "Plaza Satélite | Circuito Centro Comercial 2251 | 19.5097 | -99.2344"
    update = MockUpdate(text=f"/addmall {args}")
    context, mall_repo, _, _ = admin_context(args)
    mall_repo.create = AsyncMock(return_value=make_mall("Plaza Satélite"))

    await add_mall(update, context)

    data = mall_repo.create.await_args.args[0]
    assert data.name == "Plaza Satélite"
    assert data.latitude == 19.5097
    assert "Mall created: Plaza Satélite" in update.message.reply_text.call_args[0][0]


@pytest.mark.asyncio
async def test_add_mall_usage_error():
    update = MockUpdate(text="/addmall Plaza")
    context, mall_repo, _, _ = admin_context("Plaza")

    await add_mall(update, context)

    assert "Usage: /addmall" in update.message.reply_text.call_args[0][0]
    mall_repo.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_add_mall_out_of_range_latitude():
    args = "A | B | 95 | 2"
    update = MockUpdate(text=f"/addmall {args}")
    context, _, _, _ = admin_context(args)

    await add_mall(update, context)

    assert "Invalid latitude" in update.message.reply_text.call_args[0][0]


@pytest.mark.asyncio
async def test_edit_mall():
    mall = make_mall("Viejo")
    args = f"{mall.id} name=Nuevo nombre; longitude=-99.5"
    update = MockUpdate(text=f"/editmall {args}")
    context, mall_repo, _, _ = admin_context(args)
    mall_repo.get_by_id = AsyncMock(return_value=mall)
    mall_repo.update = AsyncMock(side_effect=lambda m: m)

    await edit_mall(update, context)

    saved = mall_repo.update.await_args.args[0]
    assert saved.name == "Nuevo nombre"
    assert saved.longitude == -99.5
    assert "Mall updated: Nuevo nombre" in update.message.reply_text.call_args[0][0]


@pytest.mark.asyncio
async def test_delete_missing_mall():
    mall_id = uuid4()
    update = MockUpdate(text=f"/delmall {mall_id}")
    context, mall_repo, _, _ = admin_context(str(mall_id))
    mall_repo.get_by_id = AsyncMock(return_value=None)

    await delete_mall(update, context)

    assert "Mall not found" in update.message.reply_text.call_args[0][0]


@pytest.mark.asyncio
async def test_add_promotion_for_missing_store():
    args = f"{uuid4()} | Buen Fin | Hasta 50% | 2026-11-20"
    update = MockUpdate(text=f"/addpromo {args}")
    context, _, store_repo, _ = admin_context(args)
    store_repo.get_by_id = AsyncMock(return_value=None)

    await add_promotion(update, context)

    assert "Store not found" in update.message.reply_text.call_args[0][0]


@pytest.mark.asyncio
async def test_add_promotion():
    store_id = uuid4()
    args = f"{store_id} | Buen Fin | Hasta 50% | 2026-11-20"
    update = MockUpdate(text=f"/addpromo {args}")
    context, _, store_repo, promotion_repo = admin_context(args)
    store_repo.get_by_id = AsyncMock(return_value=object())
    promotion_repo.create = AsyncMock(
        side_effect=lambda data, created_by=None: Promotion(
            store_id=data.store_id, title=data.title, end_date=data.end_date
        )
    )

    await add_promotion(update, context)

    reply = update.message.reply_text.call_args[0][0]
    assert "Promotion created: Buen Fin" in reply
    assert "Nov 20, 2026" in reply


@pytest.mark.asyncio
async def test_edit_store():
    store = Store(mall_id=uuid4(), name="Zara", categories=["c1"])
    args = f"{store.id} floor=2; categories=c1,c2"
    update = MockUpdate(text=f"/editstore {args}")
    context, _, store_repo, _ = admin_context(args)
    store_repo.get_by_id = AsyncMock(return_value=store)
    store_repo.update = AsyncMock(side_effect=lambda s: s)

    await edit_store(update, context)

    saved = store_repo.update.await_args.args[0]
    assert saved.floor == "2"
    assert saved.categories == ["c1", "c2"]
    assert "Store updated: Zara" in update.message.reply_text.call_args[0][0]


@pytest.mark.asyncio
async def test_edit_store_without_changes_shows_usage():
    args = str(uuid4())
    update = MockUpdate(text=f"/editstore {args}")
    context, _, store_repo, _ = admin_context(args)

    await edit_store(update, context)

    assert "Usage: /editstore" in update.message.reply_text.call_args[0][0]
    store_repo.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_edit_promotion():
    promotion = Promotion(
        store_id=uuid4(), title="Buen Fin", description="Hasta 50%", end_date=datetime(2026, 11, 20)
    )
    args = f"{promotion.id} end_date=2026-11-30"
    update = MockUpdate(text=f"/editpromo {args}")
    context, _, _, promotion_repo = admin_context(args)
    promotion_repo.get_by_id = AsyncMock(return_value=promotion)
    promotion_repo.update = AsyncMock(side_effect=lambda p: p)

    await edit_promotion(update, context)

    assert promotion_repo.update.await_args.args[0].end_date == datetime(2026, 11, 30)
    assert "Nov 30, 2026" in update.message.reply_text.call_args[0][0]


@pytest.mark.asyncio
async def test_edit_missing_promotion():
    args = f"{uuid4()} title=Gran venta"
    update = MockUpdate(text=f"/editpromo {args}")
    context, _, _, promotion_repo = admin_context(args)
    promotion_repo.get_by_id = AsyncMock(return_value=None)

    await edit_promotion(update, context)

    assert "Promotion not found" in update.message.reply_text.call_args[0][0]


@pytest.mark.asyncio
async def test_catalog_lists_mall_and_category_ids():
    mall = make_mall("Antara")
    moda = Category(name="Moda")
    update = MockUpdate(text="/catalog")
    context, mall_repo, store_repo, _ = admin_context("")
    mall_repo.list_all = AsyncMock(return_value=[mall])
    store_repo.list_categories = AsyncMock(return_value=[moda])

    await catalog(update, context)

    reply = update.message.reply_text.call_args[0][0]
    assert "Antara" in reply and str(mall.id) in reply
    assert f"Moda: {moda.id}" in reply


@pytest.mark.asyncio
async def test_catalog_for_mall_lists_store_and_promotion_ids():
    mall = make_mall("Antara")
    store = Store(mall_id=mall.id, name="Zara")
    promotion = Promotion(store_id=store.id, title="Rebajas", end_date=datetime(2026, 1, 31))
    args = str(mall.id)
    update = MockUpdate(text=f"/catalog {args}")
    context, mall_repo, store_repo, promotion_repo = admin_context(args)
    mall_repo.get_by_id = AsyncMock(return_value=mall)
    store_repo.list_by_mall = AsyncMock(return_value=[store])
    promotion_repo.list_by_stores = AsyncMock(return_value={store.id: [promotion]})

    await catalog(update, context)

    reply = update.message.reply_text.call_args[0][0]
    assert f"Zara: {store.id}" in reply
    assert f"Rebajas (ends 2026-01-31): {promotion.id}" in reply


@pytest.mark.asyncio
async def test_long_catalog_is_split_across_messages():
    mall = make_mall("Antara")
    stores = [Store(mall_id=mall.id, name=f"Tienda {i}") for i in range(150)]
    args = str(mall.id)
    update = MockUpdate(text=f"/catalog {args}")
    context, mall_repo, store_repo, promotion_repo = admin_context(args)
    mall_repo.get_by_id = AsyncMock(return_value=mall)
    store_repo.list_by_mall = AsyncMock(return_value=stores)
    promotion_repo.list_by_stores = AsyncMock(return_value={})

    await catalog(update, context)

    replies = [c.args[0] for c in update.message.reply_text.call_args_list]
    assert len(replies) > 1
    assert all(len(r) <= MAX_MESSAGE_LENGTH for r in replies)
    assert sum(r.count("🏪") for r in replies) == 150


@pytest.mark.asyncio
async def test_catalog_refused_for_non_admin():
    update = MockUpdate(text="/catalog")
    context, mall_repo, _, _ = admin_context("", admin=False)

    await catalog(update, context)

    assert "permission" in update.message.reply_text.call_args[0][0]
    mall_repo.list_all.assert_not_awaited()
