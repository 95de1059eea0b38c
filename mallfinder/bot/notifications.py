"""Telegram delivery for proximity alerts."""

from html import escape

from telegram import Bot, InlineKeyboardButton, InlineKeyboardMarkup

from mallfinder.models.mall import Mall
from mallfinder.models.ranking import RankedResult
from mallfinder.models.user import User


def format_nearby_alert(result: RankedResult[Mall]) -> str:
    mall = result.item
    return (
        "📍 <b>Mall nearby!</b>\n\n"
        f"{escape(mall.name)} is {result.distance_km:.1f} km away"
    )


class TelegramNotificationSender:
    """Sends "mall nearby" alerts as Telegram messages."""

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send(self, user: User, result: RankedResult[Mall]) -> None:
        keyboard = [[InlineKeyboardButton("View mall", callback_data=f"mall:{result.item.id}")]]
        await self.bot.send_message(
            chat_id=user.telegram_user_id,
            text=format_nearby_alert(result),
            reply_markup=InlineKeyboardMarkup(keyboard),
            parse_mode="HTML",
        )
