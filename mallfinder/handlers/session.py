"""Builds the per-update SessionContext handed to services."""

from typing import Optional

from telegram import KeyboardButton, ReplyKeyboardMarkup, Update
from telegram.ext import ContextTypes

from mallfinder.handlers import ERROR_TEMPLATES
from mallfinder.models.geo import GeoPoint, InvalidCoordinate
from mallfinder.security.permissions import PermissionChecker
from mallfinder.security.session import SessionContext
from mallfinder.storage.postgres_user_repo import PostgresUserRepository

LOCAL_LOCATION_KEY = "last_location"


def local_location(user_data: Optional[dict]) -> Optional[GeoPoint]:
    """Location shared by an unregistered chat, kept in user_data."""
    if not user_data or LOCAL_LOCATION_KEY not in user_data:
        return None
    latitude, longitude = user_data[LOCAL_LOCATION_KEY]
    try:
        return GeoPoint(latitude, longitude)
    except InvalidCoordinate:
        return None


async def build_session(update: Update, context: ContextTypes.DEFAULT_TYPE) -> SessionContext:
    """Look up the acting user once per update."""
    user_repo: PostgresUserRepository = context.bot_data["user_repo"]
    permission_checker: PermissionChecker = context.bot_data["permission_checker"]
    telegram_user_id = update.effective_user.id

    user = await user_repo.get_by_telegram_id(telegram_user_id)
    location = user.last_location if user else None
    if location is None:
        location = local_location(context.user_data)

    return SessionContext(
        telegram_user_id=telegram_user_id,
        user=user,
        is_admin=permission_checker.is_admin(telegram_user_id, user),
        location=location,
    )


async def reply(update: Update, text: str, **kwargs) -> None:
    """Answer either a command message or an inline-button press."""
    if update.callback_query is not None:
        await update.callback_query.edit_message_text(text, **kwargs)
    else:
        await update.message.reply_text(text, **kwargs)


def location_request_keyboard() -> ReplyKeyboardMarkup:
    """Keyboard with a single "share location" button."""
    return ReplyKeyboardMarkup(
        [[KeyboardButton("📍 Share my location", request_location=True)]],
        one_time_keyboard=True,
        resize_keyboard=True,
    )


async def ask_for_location(update: Update) -> None:
    """Discovery needs an origin; prompt for one instead of ranking without it."""
    text = ERROR_TEMPLATES["location_required"]()
    if update.callback_query is not None:
        await update.callback_query.edit_message_text(text)
        return
    await update.message.reply_text(text, reply_markup=location_request_keyboard())
