"""Help command handler; admins also see the catalog commands."""

from telegram import Update
from telegram.ext import CommandHandler, ContextTypes

from mallfinder.handlers.session import build_session
from mallfinder.logging import get_logger

logger = get_logger(__name__)

USER_HELP = (
    "📖 <b>Help &amp; Commands</b>\n\n"
    "<b>Discover:</b>\n"
    "• Share your location with the 📍 button to set where you are\n"
    "• /malls [search] — Malls nearest to you\n"
    "• /promotions [search] — Active promotions within 100 km\n\n"
    "<b>Notifications:</b>\n"
    "• /settings — Turn nearby-mall alerts on or off and pick a radius\n\n"
    "<b>Other Commands:</b>\n"
    "• /start — Register and open the home view\n"
    "• /help — Show this help message"
)

ADMIN_HELP = (
    "\n\n🛠️ <b>Admin:</b>\n"
    "• /catalog [mall_id] — Ids of malls and categories, or of one mall's stores and promotions\n"
    "• /addmall Name | Address | lat | lon [| description]\n"
    "• /editmall &lt;id&gt; field=value; field=value\n"
    "• /delmall &lt;id&gt;\n"
    "• /addstore &lt;mall_id&gt; | Name | description | floor | cat1,cat2\n"
    "• /editstore &lt;id&gt; field=value; field=value\n"
    "• /delstore &lt;id&gt;\n"
    "• /addpromo &lt;store_id&gt; | Title | Description | YYYY-MM-DD end [| YYYY-MM-DD start]\n"
    "• /editpromo &lt;id&gt; field=value; field=value\n"
    "• /delpromo &lt;id&gt;"
)


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    session = await build_session(update, context)

    text = USER_HELP + (ADMIN_HELP if session.is_admin else "")
    await update.message.reply_text(text, parse_mode="HTML")

    logger.info("help_displayed", telegram_user_id=session.telegram_user_id, admin=session.is_admin)


def get_help_handler() -> CommandHandler:
    """Create the /help command handler."""
    return CommandHandler("help", help_command)
