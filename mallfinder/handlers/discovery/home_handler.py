"""Home view: nearest promotions and malls around the user."""

from html import escape

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import CallbackQueryHandler, ContextTypes

from mallfinder.handlers.session import ask_for_location, build_session, reply
from mallfinder.logging import get_logger
from mallfinder.security.session import SessionContext
from mallfinder.services.distance import format_distance
from mallfinder.services.mall_directory import MallDirectoryService
from mallfinder.services.promotion_feed import PromotionFeedService

logger = get_logger(__name__)

HOME_MALLS = 5


async def render_home(update: Update, context: ContextTypes.DEFAULT_TYPE, session: SessionContext) -> None:
    """Show highlights for the session's location."""
    if session.location is None:
        await ask_for_location(update)
        return

    feed: PromotionFeedService = context.bot_data["promotion_feed"]
    directory: MallDirectoryService = context.bot_data["mall_directory"]

    highlights = await feed.highlights(session.location)
    malls = await directory.nearby_malls(session.location)

    text = "🏠 <b>Near you</b>\n\n<b>🏷️ Top promotions</b>\n"
    if highlights:
        for result in highlights:
            venue = result.item
            text += (
                f"• {escape(venue.promotion.title)} — {escape(venue.store_name)}\n"
                f"  {escape(venue.mall_name)} • {format_distance(result.distance_km)}\n"
            )
    else:
        text += "No active promotions right now.\n"

    text += "\n<b>🏬 Nearest malls</b>\n"
    keyboard = []
    for result in malls.results[:HOME_MALLS]:
        mall = result.item
        text += (
            f"• {escape(mall.name)} — {format_distance(result.distance_km)} "
            f"({malls.store_counts.get(mall.id, 0)} stores)\n"
        )
        keyboard.append([InlineKeyboardButton(mall.name[:40], callback_data=f"mall:{mall.id}")])
    if not malls.results:
        text += "No malls found.\n"

    keyboard.append([
        InlineKeyboardButton("🏬 All malls", callback_data="malls:0"),
        InlineKeyboardButton("🏷️ Promotions", callback_data="promos"),
    ])

    await reply(update, text, reply_markup=InlineKeyboardMarkup(keyboard), parse_mode="HTML")

    logger.info(
        "home_displayed",
        telegram_user_id=session.telegram_user_id,
        promotions=len(highlights),
        malls=len(malls.results),
    )


async def handle_home_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle the "home" inline button."""
    await update.callback_query.answer()
    session = await build_session(update, context)
    await render_home(update, context, session)


def get_home_handlers() -> list:
    return [CallbackQueryHandler(handle_home_callback, pattern=r"^home$")]
