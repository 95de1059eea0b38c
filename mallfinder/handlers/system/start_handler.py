"""Startup and fallback handlers.

/start registers the Telegram user on first contact and drops them on the
home view, or asks for a location when none is known yet. Plain text that
is not a command gets a short nudge instead of no reply.
"""

from dataclasses import replace

from telegram import Update
from telegram.ext import CommandHandler, ContextTypes, MessageHandler, filters

from mallfinder.handlers.discovery.home_handler import render_home
from mallfinder.handlers.session import build_session, local_location
from mallfinder.logging import get_logger
from mallfinder.models.user import UserInput
from mallfinder.services.preferences import PreferenceService
from mallfinder.storage.postgres_user_repo import PostgresUserRepository

logger = get_logger(__name__)


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Welcome message; registers new users."""
    user_repo: PostgresUserRepository = context.bot_data["user_repo"]
    telegram_user = update.effective_user

    session = await build_session(update, context)

    if session.user is None:
        user = await user_repo.create(
            UserInput(
                telegram_user_id=telegram_user.id,
                telegram_username=telegram_user.username,
                full_name=telegram_user.full_name,
            )
        )
        # A location and preferences chosen before registering move to the account
        pending = local_location(context.user_data)
        if pending is not None:
            user = await user_repo.update_location(user.id, pending)
        preferences: PreferenceService = context.bot_data["preference_service"]
        await preferences.adopt_local(user.id, context.user_data)
        session = replace(session, user=user)

        logger.info("user_registered", user_id=user.id, telegram_user_id=telegram_user.id)
        await update.message.reply_text(
            f"👋 Welcome to Mall Finder, {telegram_user.first_name}!\n\n"
            "I show you the shopping malls, stores and promotions closest to you."
        )
    else:
        await update.message.reply_text(f"👋 Welcome back, {telegram_user.first_name}!")

    await render_home(update, context, session)


async def default_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Fallback for plain text messages."""
    logger.info("received_plain_message", telegram_user_id=update.effective_user.id)
    await update.message.reply_text(
        "I didn't understand that. Try /malls or /promotions, or send /help."
    )


def get_start_handler() -> CommandHandler:
    return CommandHandler("start", start_command)


def get_default_message_handler() -> MessageHandler:
    return MessageHandler(filters.TEXT & ~filters.COMMAND, default_message)
