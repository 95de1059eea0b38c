"""Catalog admin commands.

Commands:
- /addmall Name | Address | lat | lon [| description]
- /editmall <mall_id> field=value; field=value
- /delmall <mall_id>
- /addstore <mall_id> | Name | description | floor | cat_id,cat_id
- /editstore <store_id> field=value; field=value
- /delstore <store_id>
- /addpromo <store_id> | Title | Description | YYYY-MM-DD end [| YYYY-MM-DD start]
- /editpromo <promotion_id> field=value; field=value
- /delpromo <promotion_id>
- /catalog [<mall_id>]  ids of malls and categories, or of one mall's stores and promotions
"""

from datetime import datetime
from typing import Any, Awaitable, Callable
from uuid import UUID

from pydantic import ValidationError
from telegram import Update
from telegram.ext import CommandHandler, ContextTypes

from mallfinder.handlers import ERROR_TEMPLATES
from mallfinder.handlers.session import build_session
from mallfinder.logging import get_logger
from mallfinder.logging.audit import AuditLogger
from mallfinder.models.mall import MallInput
from mallfinder.models.promotion import PromotionInput
from mallfinder.models.store import StoreInput
from mallfinder.security.permissions import PermissionDenied
from mallfinder.security.session import SessionContext
from mallfinder.services.catalog_admin import (
    CatalogAdminService,
    CatalogOverview,
    MallInventory,
    NotFoundError,
)

logger = get_logger(__name__)

DATE_FORMAT = "%Y-%m-%d"
MAX_MESSAGE_LENGTH = 4000

FLOAT_FIELDS = {"latitude", "longitude"}
DATE_FIELDS = {"start_date", "end_date"}
LIST_FIELDS = {"categories"}


class UsageError(ValueError):
    """The command arguments do not match the expected shape."""


def split_fields(raw: str) -> list[str]:
    """Split "a | b | c" into stripped parts."""
    return [part.strip() for part in raw.split("|")]


def parse_mall(raw: str) -> MallInput:
    parts = split_fields(raw)
    if len(parts) < 4:
        raise UsageError("Usage: /addmall Name | Address | lat | lon [| description]")
    try:
        latitude, longitude = float(parts[2]), float(parts[3])
    except ValueError:
        raise UsageError("Latitude and longitude must be numbers") from None
    return MallInput(
        name=parts[0],
        address=parts[1],
        latitude=latitude,
        longitude=longitude,
        description=parts[4] if len(parts) > 4 and parts[4] else None,
    )


def parse_changes(raw: str, usage: str) -> dict[str, Any]:
    """Parse "name=New name; latitude=19.4" into a field dict.

    Coordinates become floats, dates use YYYY-MM-DD, categories is a
    comma-separated id list and an empty value clears the field.
    """
    changes: dict[str, Any] = {}
    for assignment in filter(None, (a.strip() for a in raw.split(";"))):
        field, sep, value = assignment.partition("=")
        if not sep:
            raise UsageError(f"Expected field=value, got {assignment!r}")
        field = field.strip().lower()
        value = value.strip()
        if field in FLOAT_FIELDS:
            try:
                changes[field] = float(value)
            except ValueError:
                raise UsageError(f"{field} must be a number") from None
        elif field in DATE_FIELDS:
            try:
                changes[field] = datetime.strptime(value, DATE_FORMAT) if value else None
            except ValueError:
                raise UsageError("Dates must look like 2026-12-31") from None
        elif field in LIST_FIELDS:
            changes[field] = [item.strip() for item in value.split(",") if item.strip()]
        else:
            changes[field] = value or None
    if not changes:
        raise UsageError(usage)
    return changes


def parse_store(raw: str) -> StoreInput:
    parts = split_fields(raw)
    if len(parts) < 2:
        raise UsageError("Usage: /addstore <mall_id> | Name | description | floor | cat_id,cat_id")
    categories = parts[4].split(",") if len(parts) > 4 else []
    return StoreInput(
        mall_id=parse_id(parts[0]),
        name=parts[1],
        description=parts[2] if len(parts) > 2 and parts[2] else None,
        floor=parts[3] if len(parts) > 3 and parts[3] else None,
        categories=[c.strip() for c in categories if c.strip()],
    )


def parse_promotion(raw: str) -> PromotionInput:
    parts = split_fields(raw)
    if len(parts) < 4:
        raise UsageError(
            "Usage: /addpromo <store_id> | Title | Description | YYYY-MM-DD end [| YYYY-MM-DD start]"
        )
    try:
        end_date = datetime.strptime(parts[3], DATE_FORMAT)
        start_date = datetime.strptime(parts[4], DATE_FORMAT) if len(parts) > 4 and parts[4] else None
    except ValueError:
        raise UsageError("Dates must look like 2026-12-31") from None
    return PromotionInput(
        store_id=parse_id(parts[0]),
        title=parts[1],
        description=parts[2],
        start_date=start_date,
        end_date=end_date,
    )


def parse_id(raw: str) -> UUID:
    try:
        return UUID(raw.strip())
    except ValueError:
        raise UsageError(f"Not a valid id: {raw.strip()!r}") from None


def command_text(context: ContextTypes.DEFAULT_TYPE) -> str:
    return " ".join(context.args) if context.args else ""


def split_message(text: str, limit: int = MAX_MESSAGE_LENGTH) -> list[str]:
    """Split a long reply on line boundaries so each part fits one Telegram message."""
    chunks: list[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            candidate = line
        current = candidate
    if current:
        chunks.append(current)
    return chunks or [text]


def format_overview(overview: CatalogOverview) -> str:
    lines = ["🏬 Malls"]
    lines += [f"• {mall.name}\n  {mall.id}" for mall in overview.malls] or ["(none)"]
    lines += ["", "🏷️ Categories"]
    lines += [f"• {category.name}: {category.id}" for category in overview.categories] or ["(none)"]
    lines += ["", "Send /catalog <mall_id> for a mall's stores and promotions."]
    return "\n".join(lines)


def format_inventory(inventory: MallInventory) -> str:
    lines = [f"🏬 {inventory.mall.name}\n{inventory.mall.id}", ""]
    if not inventory.stores:
        lines.append("No stores yet.")
    for store in inventory.stores:
        lines.append(f"🏪 {store.name}: {store.id}")
        for promotion in inventory.promotions.get(store.id, []):
            lines.append(
                f"   🏷️ {promotion.title} (ends {promotion.end_date.strftime(DATE_FORMAT)}): {promotion.id}"
            )
    return "\n".join(lines)


async def _run_admin_action(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
    action: Callable[[CatalogAdminService, SessionContext], Awaitable[str]],
) -> None:
    """Run one catalog change and translate failures into replies."""
    session = await build_session(update, context)
    service: CatalogAdminService = context.bot_data["catalog_admin"]

    if not session.is_admin:
        command = update.message.text.split()[0] if update.message.text else "admin"
        AuditLogger.log_permission_denied(session.telegram_user_id, command)
        await update.message.reply_text(ERROR_TEMPLATES["permission_denied"]())
        return

    try:
        message = await action(service, session)
    except PermissionDenied:
        await update.message.reply_text(ERROR_TEMPLATES["permission_denied"]())
        return
    except NotFoundError as e:
        await update.message.reply_text(ERROR_TEMPLATES[f"{e.resource_type}_not_found"]())
        return
    except UsageError as e:
        await update.message.reply_text(f"❌ {e}")
        return
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(loc) for loc in error["loc"]) or "input"
        await update.message.reply_text(ERROR_TEMPLATES["invalid_input"](field, error["msg"]))
        return
    except ValueError as e:
        await update.message.reply_text(f"❌ {e}")
        return

    for chunk in split_message(message):
        await update.message.reply_text(chunk)


async def add_mall(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    async def action(service: CatalogAdminService, session: SessionContext) -> str:
        data = parse_mall(command_text(context))
        mall = await service.create_mall(session, data)
        return f"✅ Mall created: {mall.name}\nID: {mall.id}"

    await _run_admin_action(update, context, action)


async def edit_mall(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    async def action(service: CatalogAdminService, session: SessionContext) -> str:
        raw = command_text(context)
        mall_ref, _, assignments = raw.partition(" ")
        mall = await service.update_mall(
            session,
            parse_id(mall_ref),
            parse_changes(assignments, "Usage: /editmall <mall_id> field=value; field=value"),
        )
        return f"✅ Mall updated: {mall.name}"

    await _run_admin_action(update, context, action)


async def delete_mall(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    async def action(service: CatalogAdminService, session: SessionContext) -> str:
        await service.delete_mall(session, parse_id(command_text(context)))
        return "🗑️ Mall deleted, along with its stores and promotions."

    await _run_admin_action(update, context, action)


async def add_store(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    async def action(service: CatalogAdminService, session: SessionContext) -> str:
        store = await service.create_store(session, parse_store(command_text(context)))
        return f"✅ Store created: {store.name}\nID: {store.id}"

    await _run_admin_action(update, context, action)


async def edit_store(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    async def action(service: CatalogAdminService, session: SessionContext) -> str:
        store_ref, _, assignments = command_text(context).partition(" ")
        store = await service.update_store(
            session,
            parse_id(store_ref),
            parse_changes(assignments, "Usage: /editstore <store_id> field=value; field=value"),
        )
        return f"✅ Store updated: {store.name}"

    await _run_admin_action(update, context, action)


async def delete_store(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    async def action(service: CatalogAdminService, session: SessionContext) -> str:
        await service.delete_store(session, parse_id(command_text(context)))
        return "🗑️ Store deleted."

    await _run_admin_action(update, context, action)


async def add_promotion(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    async def action(service: CatalogAdminService, session: SessionContext) -> str:
        promotion = await service.create_promotion(session, parse_promotion(command_text(context)))
        return (
            f"✅ Promotion created: {promotion.title}\n"
            f"Ends {promotion.end_date.strftime('%b %d, %Y')}\nID: {promotion.id}"
        )

    await _run_admin_action(update, context, action)


async def edit_promotion(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    async def action(service: CatalogAdminService, session: SessionContext) -> str:
        promotion_ref, _, assignments = command_text(context).partition(" ")
        promotion = await service.update_promotion(
            session,
            parse_id(promotion_ref),
            parse_changes(assignments, "Usage: /editpromo <promotion_id> field=value; field=value"),
        )
        return (
            f"✅ Promotion updated: {promotion.title}\n"
            f"Ends {promotion.end_date.strftime('%b %d, %Y')}"
        )

    await _run_admin_action(update, context, action)


async def delete_promotion(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    async def action(service: CatalogAdminService, session: SessionContext) -> str:
        await service.delete_promotion(session, parse_id(command_text(context)))
        return "🗑️ Promotion deleted."

    await _run_admin_action(update, context, action)


async def catalog(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    async def action(service: CatalogAdminService, session: SessionContext) -> str:
        raw = command_text(context).strip()
        if not raw:
            return format_overview(await service.overview(session))
        return format_inventory(await service.mall_inventory(session, parse_id(raw)))

    await _run_admin_action(update, context, action)


def get_catalog_handlers() -> list:
    return [
        CommandHandler("addmall", add_mall),
        CommandHandler("editmall", edit_mall),
        CommandHandler("delmall", delete_mall),
        CommandHandler("addstore", add_store),
        CommandHandler("editstore", edit_store),
        CommandHandler("delstore", delete_store),
        CommandHandler("addpromo", add_promotion),
        CommandHandler("editpromo", edit_promotion),
        CommandHandler("delpromo", delete_promotion),
        CommandHandler("catalog", catalog),
    ]
