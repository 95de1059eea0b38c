"""Notification settings: on/off switch and alert radius."""

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import CallbackQueryHandler, CommandHandler, ContextTypes

from mallfinder.handlers import ERROR_TEMPLATES
from mallfinder.handlers.session import build_session, reply
from mallfinder.logging import get_logger
from mallfinder.models.preferences import MAX_RADIUS_KM, MIN_RADIUS_KM, NotificationPreferences
from mallfinder.services.preferences import PreferenceService

logger = get_logger(__name__)

RADIUS_CHOICES_KM = (1, 2, 4, 10, 25, 50)


def format_settings(prefs: NotificationPreferences, registered: bool) -> tuple[str, InlineKeyboardMarkup]:
    status = "🔔 On" if prefs.notifications_enabled else "🔕 Off"
    text = (
        "⚙️ <b>Notification settings</b>\n\n"
        f"Nearby-mall alerts: <b>{status}</b>\n"
        f"Alert radius: <b>{prefs.notification_radius_km} km</b>\n"
    )
    if not registered:
        text += "\n<i>Alerts are only sent to registered users. Use /start to register.</i>\n"

    toggle_label = "🔕 Turn off" if prefs.notifications_enabled else "🔔 Turn on"
    radius_row = [
        InlineKeyboardButton(
            ("✅ " if km == prefs.notification_radius_km else "") + f"{km} km",
            callback_data=f"prefs:radius:{km}",
        )
        for km in RADIUS_CHOICES_KM
    ]
    keyboard = [
        [InlineKeyboardButton(toggle_label, callback_data="prefs:toggle")],
        radius_row[:3],
        radius_row[3:],
    ]
    return text, InlineKeyboardMarkup(keyboard)


async def settings_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /settings."""
    session = await build_session(update, context)
    service: PreferenceService = context.bot_data["preference_service"]

    prefs = await service.get(service.store_for(session, context.user_data))
    text, markup = format_settings(prefs, session.is_registered)
    await reply(update, text, reply_markup=markup, parse_mode="HTML")


async def handle_settings_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle prefs:toggle and prefs:radius:{km}."""
    query = update.callback_query
    await query.answer()

    session = await build_session(update, context)
    service: PreferenceService = context.bot_data["preference_service"]
    store = service.store_for(session, context.user_data)

    parts = query.data.split(":")
    if parts[1:] == ["toggle"]:
        current = await service.get(store)
        prefs = await service.set_enabled(store, not current.notifications_enabled)
    elif len(parts) == 3 and parts[1] == "radius" and parts[2].isdigit():
        try:
            prefs = await service.set_radius(store, int(parts[2]))
        except ValueError:
            await query.edit_message_text(
                ERROR_TEMPLATES["invalid_input"](
                    "radius", f"Choose between {MIN_RADIUS_KM} and {MAX_RADIUS_KM} km"
                )
            )
            return
    else:
        await query.edit_message_text("❌ Invalid request")
        return

    text, markup = format_settings(prefs, session.is_registered)
    await query.edit_message_text(text, reply_markup=markup, parse_mode="HTML")

    logger.info(
        "settings_changed",
        telegram_user_id=session.telegram_user_id,
        enabled=prefs.notifications_enabled,
        radius_km=prefs.notification_radius_km,
    )


def get_settings_handlers() -> list:
    return [
        CommandHandler("settings", settings_command),
        CallbackQueryHandler(handle_settings_callback, pattern=r"^prefs:"),
    ]
