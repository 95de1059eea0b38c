"""Promotions list around the user."""

from html import escape

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import CallbackQueryHandler, CommandHandler, ContextTypes

from mallfinder.handlers import ERROR_TEMPLATES
from mallfinder.handlers.session import ask_for_location, build_session, reply
from mallfinder.logging import get_logger
from mallfinder.models.promotion import PromotionVenue
from mallfinder.models.ranking import RankedResult
from mallfinder.services.distance import format_distance
from mallfinder.services.promotion_feed import PromotionFeedService

logger = get_logger(__name__)

# Telegram caps messages at 4096 characters
MAX_LISTED_PROMOTIONS = 15


def format_promotions(results: list[RankedResult[PromotionVenue]], text_query: str | None) -> str:
    text = "🏷️ <b>Promotions near you</b>"
    if text_query:
        text += f" matching “{escape(text_query)}”"
    text += "\n\n"

    for result in results[:MAX_LISTED_PROMOTIONS]:
        venue = result.item
        promotion = venue.promotion
        text += (
            f"<b>{escape(promotion.title)}</b>\n"
            f"🏪 {escape(venue.store_name)} • 🏬 {escape(venue.mall_name)}\n"
            f"🚶 {format_distance(result.distance_km)} • until "
            f"{promotion.end_date.strftime('%b %d, %Y')}\n"
        )
        if promotion.description:
            text += f"{escape(promotion.description[:150])}\n"
        text += "\n"

    if len(results) > MAX_LISTED_PROMOTIONS:
        text += f"…and {len(results) - MAX_LISTED_PROMOTIONS} more. Narrow it down with /promotions &lt;search&gt;."
    return text


async def promotions_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /promotions [search text]."""
    text_query = " ".join(context.args).strip() if context.args else None
    await _show_promotions(update, context, text_query or None)


async def handle_promotions_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.callback_query.answer()
    await _show_promotions(update, context, None)


async def _show_promotions(
    update: Update, context: ContextTypes.DEFAULT_TYPE, text_query: str | None
) -> None:
    session = await build_session(update, context)
    if session.location is None:
        await ask_for_location(update)
        return

    feed: PromotionFeedService = context.bot_data["promotion_feed"]
    results = await feed.promotions_near(session.location, text_query=text_query)

    if not results:
        await reply(update, ERROR_TEMPLATES["no_results"]("promotions"))
        return

    keyboard = [[InlineKeyboardButton("🏠 Home", callback_data="home")]]
    await reply(
        update,
        format_promotions(results, text_query),
        reply_markup=InlineKeyboardMarkup(keyboard),
        parse_mode="HTML",
    )

    logger.info(
        "promotions_displayed",
        telegram_user_id=session.telegram_user_id,
        results=len(results),
        has_query=bool(text_query),
    )


def get_promotions_handlers() -> list:
    return [
        CommandHandler("promotions", promotions_command),
        CallbackQueryHandler(handle_promotions_callback, pattern=r"^promos$"),
    ]
