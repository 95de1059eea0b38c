"""Configuration settings loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Telegram Bot
    bot_token: str

    # Database
    database_url: str

    # Redis (notification cooldowns)
    redis_url: str = "redis://localhost:6379/0"

    # Discovery & Geolocation
    promotions_radius_km: float = Field(default=100.0, gt=0)
    highlight_promotions_limit: int = Field(default=5, gt=0)
    malls_page_size: int = Field(default=10, gt=0)

    # Proximity notifications
    default_notification_radius_km: int = Field(default=4, ge=1, le=50)
    notification_check_interval_seconds: int = Field(default=900, gt=0)
    notification_cooldown_hours: int = Field(default=24, gt=0)

    # Admin User IDs (comma-separated)
    admin_telegram_ids: str = ""

    # Logging
    log_level: str = "INFO"

    # Application
    app_name: str = "mall-finder"
    environment: str = "development"

    @property
    def admin_user_ids(self) -> list[int]:
        """Parse admin user IDs from comma-separated string."""
        if not self.admin_telegram_ids:
            return []
        return [int(uid.strip()) for uid in self.admin_telegram_ids.split(",") if uid.strip()]

    @property
    def notification_cooldown_seconds(self) -> int:
        return self.notification_cooldown_hours * 3600


def load_settings() -> Settings:
    """Load and validate settings from environment."""
    return Settings()  # type: ignore[call-arg]
