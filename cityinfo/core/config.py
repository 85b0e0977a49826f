# cityinfo/core/config.py
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """
    Настройки приложения из окружения / .env.

    Имена переменных совпадают с полями (DB_HOST, TELEGRAM_BOT_TOKEN, COURSES_TOKEN и т.д.).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # База с курсами (new_exchange_rates, new_nbRates, new_exchCityNames)
    db_driver: str = "mysql+aiomysql"
    db_host: str = "127.0.0.1"
    db_port: int = 3306
    db_user: str = "city_api"
    db_pass: str = "city_api"
    db_name: str = "city_api"
    database_url: Optional[str] = None

    # База бота (telegram_bot_chats, telegram_bot_requests), по умолчанию та же
    api_database_url: Optional[str] = None

    host: str = "0.0.0.0"
    port: int = 3000

    socket_client_origin: str = ""

    telegram_bot_token: str = ""
    api_url: str = ""
    site_url: str = "https://cityinfo.kz/"
    register_webhook: bool = True

    courses_token: str = ""

    environment: str = "production"
    timezone: str = "Asia/Almaty"
    log_level: str = "INFO"

    @property
    def city_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"{self.db_driver}://{self.db_user}:{self.db_pass}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}?charset=utf8mb4"
        )

    @property
    def bot_database_url(self) -> str:
        return self.api_database_url or self.city_database_url

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def webhook_path(self) -> str:
        return f"/telegram/{self.telegram_bot_token}/webhook"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
