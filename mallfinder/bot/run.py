"""Telegram bot startup and main application entry point."""

import asyncio

from telegram import BotCommand
from telegram.ext import Application

from mallfinder.bot.command_map import register_handlers
from mallfinder.bot.notifications import TelegramNotificationSender
from mallfinder.config import load_settings
from mallfinder.logging import get_logger, setup_logging
from mallfinder.security.permissions import PermissionChecker
from mallfinder.services.catalog_admin import CatalogAdminService
from mallfinder.services.mall_directory import MallDirectoryService
from mallfinder.services.preferences import PreferenceService
from mallfinder.services.promotion_feed import PromotionFeedService
from mallfinder.services.proximity_notifier import ProximityNotifier
from mallfinder.services.proximity_ranking import ProximityRankingService
from mallfinder.services.scheduler import SchedulerService
from mallfinder.storage.database import Database
from mallfinder.storage.postgres_mall_repo import PostgresMallRepository
from mallfinder.storage.postgres_preferences_repo import PostgresPreferencesRepository
from mallfinder.storage.postgres_promotion_repo import PostgresPromotionRepository
from mallfinder.storage.postgres_store_repo import PostgresStoreRepository
from mallfinder.storage.postgres_user_repo import PostgresUserRepository
from mallfinder.storage.redis_cooldowns import RedisCooldownStore

BOT_COMMANDS = [
    BotCommand("start", "Start or restart the bot"),
    BotCommand("malls", "Malls near you"),
    BotCommand("promotions", "Promotions near you"),
    BotCommand("settings", "Nearby-mall alerts"),
    BotCommand("help", "Show help and commands"),
]


async def setup_bot_menu(application: Application) -> None:
    """Configure the bot menu commands."""
    await application.bot.set_my_commands(BOT_COMMANDS)
    get_logger(__name__).info("bot_menu_configured", command_count=len(BOT_COMMANDS))


async def main() -> None:
    """Initialize and start the Telegram bot."""
    settings = load_settings()
    setup_logging(settings.log_level)
    logger = get_logger(__name__)

    logger.info("Starting Mall Finder bot", environment=settings.environment)

    db = Database(settings.database_url)
    await db.connect()

    user_repo = PostgresUserRepository(db)
    mall_repo = PostgresMallRepository(db)
    store_repo = PostgresStoreRepository(db)
    promotion_repo = PostgresPromotionRepository(db)
    preferences_repo = PostgresPreferencesRepository(db)

    cooldowns = RedisCooldownStore(settings.redis_url, ttl_seconds=settings.notification_cooldown_seconds)
    await cooldowns.connect()

    permission_checker = PermissionChecker(admin_user_ids=settings.admin_user_ids)
    ranking_service = ProximityRankingService()

    application = Application.builder().token(settings.bot_token).build()

    notifier = ProximityNotifier(
        user_repo,
        mall_repo,
        cooldowns,
        TelegramNotificationSender(application.bot),
        ranking_service,
    )
    scheduler = SchedulerService(notifier, interval_seconds=settings.notification_check_interval_seconds)

    # Store services in bot_data for handler access
    application.bot_data["user_repo"] = user_repo
    application.bot_data["permission_checker"] = permission_checker
    application.bot_data["mall_directory"] = MallDirectoryService(
        mall_repo, store_repo, promotion_repo, ranking_service, page_size=settings.malls_page_size
    )
    application.bot_data["promotion_feed"] = PromotionFeedService(
        promotion_repo,
        ranking_service,
        radius_km=settings.promotions_radius_km,
        highlights_limit=settings.highlight_promotions_limit,
    )
    application.bot_data["preference_service"] = PreferenceService(
        preferences_repo, default_radius_km=settings.default_notification_radius_km
    )
    application.bot_data["catalog_admin"] = CatalogAdminService(
        mall_repo, store_repo, promotion_repo, permission_checker
    )

    register_handlers(application)

    logger.info("Bot initialization complete, starting polling")

    await application.initialize()
    await setup_bot_menu(application)
    await application.start()
    await application.updater.start_polling(allowed_updates=["message", "callback_query"])

    scheduler_task = asyncio.create_task(scheduler.start())

    try:
        await asyncio.Event().wait()
    except (KeyboardInterrupt, SystemExit, asyncio.CancelledError):
        logger.info("Shutting down bot")
    finally:
        await scheduler.stop()
        await scheduler_task
        await cooldowns.disconnect()
        await db.disconnect()
        await application.updater.stop()
        await application.stop()
        await application.shutdown()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
