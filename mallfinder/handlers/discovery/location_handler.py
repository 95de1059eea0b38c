"""Receives shared locations and stores the latest fix."""

from dataclasses import replace

from telegram import Update
from telegram.ext import ContextTypes, MessageHandler, filters

from mallfinder.handlers import ERROR_TEMPLATES
from mallfinder.handlers.discovery.home_handler import render_home
from mallfinder.handlers.session import LOCAL_LOCATION_KEY, build_session
from mallfinder.logging import get_logger
from mallfinder.models.geo import GeoPoint, InvalidCoordinate
from mallfinder.storage.postgres_user_repo import PostgresUserRepository

logger = get_logger(__name__)


async def location_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Save the user's position and show what is nearby."""
    shared = update.message.location
    try:
        point = GeoPoint(shared.latitude, shared.longitude)
    except InvalidCoordinate:
        await update.message.reply_text(
            ERROR_TEMPLATES["invalid_input"]("location", "Please share a valid location")
        )
        return

    session = await build_session(update, context)

    if session.user is not None:
        user_repo: PostgresUserRepository = context.bot_data["user_repo"]
        await user_repo.update_location(session.user.id, point)
    else:
        context.user_data[LOCAL_LOCATION_KEY] = (point.latitude, point.longitude)

    logger.info(
        "location_received",
        telegram_user_id=session.telegram_user_id,
        registered=session.is_registered,
    )

    await render_home(update, context, replace(session, location=point))


def get_location_handler() -> MessageHandler:
    return MessageHandler(filters.LOCATION, location_message)
