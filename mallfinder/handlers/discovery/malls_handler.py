"""Mall listing, mall detail and store detail handlers."""

import base64
from html import escape
from uuid import UUID

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import CallbackQueryHandler, CommandHandler, ContextTypes

from mallfinder.handlers import ERROR_TEMPLATES
from mallfinder.handlers.session import ask_for_location, build_session, reply
from mallfinder.logging import get_logger
from mallfinder.services.distance import format_distance
from mallfinder.services.mall_directory import MallDetail, MallDirectoryService, MallPage

logger = get_logger(__name__)

MALLS_QUERY_KEY = "malls_query"
CATEGORY_BUTTONS_PER_ROW = 3


def compact_id(value: UUID) -> str:
    """22-character URL-safe form of a UUID, to fit Telegram's 64-byte callback data."""
    return base64.urlsafe_b64encode(value.bytes).rstrip(b"=").decode("ascii")


def expand_id(token: str) -> UUID:
    """Inverse of compact_id; plain UUID strings are accepted too.

    Raises:
        ValueError: if the token is neither form
    """
    if len(token) == 22:
        return UUID(bytes=base64.urlsafe_b64decode(token + "=="))
    return UUID(token)


def format_mall_page(page: MallPage, text_query: str | None) -> tuple[str, InlineKeyboardMarkup]:
    """Render one page of ranked malls."""
    title = "🏬 <b>Malls near you</b>"
    if text_query:
        title += f" matching “{escape(text_query)}”"
    text = f"{title} (Page {page.page + 1}/{page.total_pages})\n\n"

    keyboard = []
    for result in page.results:
        mall = result.item
        text += (
            f"<b>{escape(mall.name)}</b>\n"
            f"📍 {escape(mall.address)}\n"
            f"🚶 {format_distance(result.distance_km)} • "
            f"🏪 {page.store_counts.get(mall.id, 0)} stores\n\n"
        )
        keyboard.append([InlineKeyboardButton(f"View: {mall.name[:30]}", callback_data=f"mall:{mall.id}")])

    nav_buttons = []
    if page.page > 0:
        nav_buttons.append(InlineKeyboardButton("⬅️ Previous", callback_data=f"malls:{page.page - 1}"))
    if page.has_more:
        nav_buttons.append(InlineKeyboardButton("➡️ Next", callback_data=f"malls:{page.page + 1}"))
    if nav_buttons:
        keyboard.append(nav_buttons)

    return text, InlineKeyboardMarkup(keyboard)


def format_mall_detail(detail: MallDetail) -> tuple[str, InlineKeyboardMarkup]:
    """Render a mall with its stores and category filter buttons."""
    mall = detail.mall
    text = f"🏬 <b>{escape(mall.name)}</b>\n📍 {escape(mall.address)}\n"
    if detail.distance_km is not None:
        text += f"🚶 {format_distance(detail.distance_km)} away\n"
    if mall.description:
        text += f"\n{escape(mall.description)}\n"

    text += f"\n<b>Stores</b> ({len(detail.stores)}/{detail.total_stores})\n"
    keyboard = []
    for venue in detail.stores:
        store = venue.store
        line = f"• <b>{escape(store.name)}</b>"
        if store.floor:
            line += f" — floor {escape(store.floor)}"
        if venue.active_promotions_count:
            line += f" 🏷️ {venue.active_promotions_count}"
        categories = detail.category_names(store)
        if categories:
            line += f"\n  <i>{escape(categories)}</i>"
        text += line + "\n"
        keyboard.append([InlineKeyboardButton(store.name[:40], callback_data=f"store:{store.id}")])
    if not detail.stores:
        text += "No stores match this filter.\n"

    chips = [
        InlineKeyboardButton(
            ("✅ " if detail.selected_category is None else "") + "All",
            callback_data=f"mall:{mall.id}",
        )
    ]
    for category in detail.categories:
        selected = detail.selected_category == str(category.id)
        chips.append(
            InlineKeyboardButton(
                ("✅ " if selected else "") + category.name,
                callback_data=f"mall:{compact_id(mall.id)}:{compact_id(category.id)}",
            )
        )
    for i in range(0, len(chips), CATEGORY_BUTTONS_PER_ROW):
        keyboard.append(chips[i : i + CATEGORY_BUTTONS_PER_ROW])

    keyboard.append([InlineKeyboardButton("« Back to malls", callback_data="malls:0")])
    return text, InlineKeyboardMarkup(keyboard)


async def malls_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /malls [search text]."""
    text_query = " ".join(context.args).strip() if context.args else ""
    context.user_data[MALLS_QUERY_KEY] = text_query or None
    await _show_malls(update, context, page=0)


async def handle_malls_page(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle malls:{page} pagination callbacks."""
    query = update.callback_query
    await query.answer()

    parts = query.data.split(":")
    if len(parts) != 2 or not parts[1].isdigit():
        await query.edit_message_text("❌ Invalid request")
        return

    await _show_malls(update, context, page=int(parts[1]))


async def _show_malls(update: Update, context: ContextTypes.DEFAULT_TYPE, page: int) -> None:
    session = await build_session(update, context)
    if session.location is None:
        await ask_for_location(update)
        return

    directory: MallDirectoryService = context.bot_data["mall_directory"]
    text_query = context.user_data.get(MALLS_QUERY_KEY)
    result = await directory.nearby_malls(session.location, text_query=text_query, page=page)

    if not result.results:
        await reply(update, ERROR_TEMPLATES["no_results"]("malls"))
        return

    text, markup = format_mall_page(result, text_query)
    await reply(update, text, reply_markup=markup, parse_mode="HTML")


async def handle_mall_detail(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle mall:{mall_id}[:{category_id}] callbacks (ids plain or compact)."""
    query = update.callback_query
    await query.answer()

    parts = query.data.split(":")
    try:
        mall_id = expand_id(parts[1])
        category = str(expand_id(parts[2])) if len(parts) > 2 else None
    except (IndexError, ValueError):
        await query.edit_message_text("❌ Invalid request")
        return

    session = await build_session(update, context)
    directory: MallDirectoryService = context.bot_data["mall_directory"]
    detail = await directory.mall_detail(mall_id, origin=session.location, category=category)

    if detail is None:
        await query.edit_message_text(ERROR_TEMPLATES["mall_not_found"]())
        return

    text, markup = format_mall_detail(detail)
    await query.edit_message_text(text, reply_markup=markup, parse_mode="HTML")

    logger.info(
        "mall_detail_viewed",
        telegram_user_id=session.telegram_user_id,
        mall_id=str(mall_id),
        category=category,
        stores=len(detail.stores),
    )


async def handle_store_detail(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle store:{store_id} callbacks."""
    query = update.callback_query
    await query.answer()

    try:
        store_id = UUID(query.data.split(":", 1)[1])
    except (IndexError, ValueError):
        await query.edit_message_text("❌ Invalid request")
        return

    directory: MallDirectoryService = context.bot_data["mall_directory"]
    detail = await directory.store_detail(store_id)
    if detail is None:
        await query.edit_message_text(ERROR_TEMPLATES["store_not_found"]())
        return

    store = detail.store
    text = f"🏪 <b>{escape(store.name)}</b>\n"
    if detail.mall:
        text += f"🏬 {escape(detail.mall.name)}\n"
    if store.floor or store.location_in_mall:
        text += f"📍 {escape(' • '.join(p for p in (store.floor, store.location_in_mall) if p))}\n"
    if store.hours:
        text += f"🕐 {escape(store.hours)}\n"
    if store.contact_number:
        text += f"📞 {escape(store.contact_number)}\n"
    if store.description:
        text += f"\n{escape(store.description)}\n"

    text += "\n<b>🏷️ Active promotions</b>\n"
    for promotion in detail.promotions:
        text += (
            f"• <b>{escape(promotion.title)}</b> — until "
            f"{promotion.end_date.strftime('%b %d, %Y')}\n  {escape(promotion.description)}\n"
        )
    if not detail.promotions:
        text += "None right now.\n"

    keyboard = []
    if store.mall_id:
        keyboard.append([InlineKeyboardButton("« Back to mall", callback_data=f"mall:{store.mall_id}")])

    await query.edit_message_text(
        text, reply_markup=InlineKeyboardMarkup(keyboard), parse_mode="HTML"
    )


def get_malls_handlers() -> list:
    """Return list of mall-related handlers."""
    return [
        CommandHandler("malls", malls_command),
        CallbackQueryHandler(handle_malls_page, pattern=r"^malls:"),
        CallbackQueryHandler(handle_mall_detail, pattern=r"^mall:"),
        CallbackQueryHandler(handle_store_detail, pattern=r"^store:"),
    ]
