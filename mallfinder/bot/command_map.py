"""Command routing configuration for bot handlers.

Registers all command, callback and message handlers with the bot application.
"""

from telegram import Update
from telegram.ext import Application, ContextTypes

from mallfinder.handlers import format_error_message
from mallfinder.handlers.admin.catalog_handler import get_catalog_handlers
from mallfinder.handlers.discovery.home_handler import get_home_handlers
from mallfinder.handlers.discovery.location_handler import get_location_handler
from mallfinder.handlers.discovery.malls_handler import get_malls_handlers
from mallfinder.handlers.discovery.promotions_handler import get_promotions_handlers
from mallfinder.handlers.system.help_handler import get_help_handler
from mallfinder.handlers.system.settings_handler import get_settings_handlers
from mallfinder.handlers.system.start_handler import (
    get_default_message_handler,
    get_start_handler,
)
from mallfinder.logging import get_logger

logger = get_logger(__name__)


def register_handlers(app: Application) -> None:
    """
    Register all handlers with the application.

    Args:
        app: Telegram bot Application instance
    """
    # System handlers
    app.add_handler(get_start_handler())
    app.add_handler(get_help_handler())
    for handler in get_settings_handlers():
        app.add_handler(handler)
    logger.info("handler_registered", handler="system")

    # Location sharing
    app.add_handler(get_location_handler())
    logger.info("handler_registered", handler="location")

    # Discovery
    for handler in get_home_handlers() + get_malls_handlers() + get_promotions_handlers():
        app.add_handler(handler)
    logger.info("handler_registered", handler="discovery")

    # Admin catalog commands
    for handler in get_catalog_handlers():
        app.add_handler(handler)
    logger.info("handler_registered", handler="catalog_admin")

    # Default message handler (must be last)
    app.add_handler(get_default_message_handler())
    logger.info("handler_registered", handler="default_message")

    app.add_error_handler(error_handler)

    logger.info("all_handlers_registered")


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log errors that escaped a handler and tell the user something went wrong."""
    logger.error(
        "handler_failed",
        error=str(context.error),
        exc_info=context.error,
    )
    if isinstance(update, Update) and update.effective_message is not None:
        await update.effective_message.reply_text(
            format_error_message("⚠️", "Something went wrong on our side.", "Please try again in a moment.")
        )
