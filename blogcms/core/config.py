from datetime import datetime
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings

from blogcms.core.env_manager import EnvManager


class Settings(BaseSettings):
    DATABASE_URL: str = EnvManager.get_env_variable(
        "DATABASE_URL", "sqlite+aiosqlite:///database.db"
    )
    SECRET_KEY: str = EnvManager.get_env_variable(
        "SECRET_KEY", "your-secret-key-change-in-production"
    )
    TOKEN_EXPIRE_HOURS: int = EnvManager.get_int("TOKEN_EXPIRE_HOURS", 24)

    HOST: str = EnvManager.get_env_variable("HOST", "0.0.0.0")
    PORT: int = EnvManager.get_int("PORT", 3000)
    LOG_LEVEL: str = EnvManager.get_env_variable("LOG_LEVEL", "INFO")

    PROJECT_NAME: str = EnvManager.get_env_variable("PROJECT_NAME", "Blog CMS")
    PROJECT_INFO: str = EnvManager.get_env_variable(
        "PROJECT_INFO", "REST backend for a personal blog and its admin panel"
    )
    PROJECT_VERSION: str = EnvManager.get_env_variable("PROJECT_VERSION", "1.0.0")
    TIME_ZONE: str = EnvManager.get_env_variable("TIME_ZONE", "UTC")

    UPLOAD_FOLDER: str = EnvManager.get_env_variable("UPLOAD_FOLDER", "uploads")
    UPLOAD_URL_PREFIX: str = EnvManager.get_env_variable("UPLOAD_URL_PREFIX", "/uploads")
    MAX_UPLOAD_SIZE: int = EnvManager.get_int("MAX_UPLOAD_SIZE", 5 * 1024 * 1024)

    DEFAULT_AUTHOR: str = EnvManager.get_env_variable("DEFAULT_AUTHOR", "Admin")
    DEFAULT_READ_TIME: int = EnvManager.get_int("DEFAULT_READ_TIME", 5)

    DEFAULT_ADMIN_USERNAME: str = EnvManager.get_env_variable("DEFAULT_ADMIN_USERNAME", "admin")
    DEFAULT_ADMIN_PASSWORD: str = EnvManager.get_env_variable("DEFAULT_ADMIN_PASSWORD", "admin123")
    DEFAULT_ADMIN_EMAIL: str = EnvManager.get_env_variable(
        "DEFAULT_ADMIN_EMAIL", "admin@example.com"
    )

    def get_now(self):
        """Get the current time in the configured time zone."""
        tz = ZoneInfo(self.TIME_ZONE)
        return datetime.now(tz)


settings = Settings()
