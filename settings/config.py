"""Конфигурация приложения из env переменных"""
from pathlib import Path

from environs import Env


# Load environment variables
env = Env()

STAND = env.str('STAND', default='local')
BASE_PATH = Path.cwd().absolute()

if STAND == 'local':
    env.read_env(path=str(BASE_PATH / '.env'))


class Settings:
    def __init__(self):
        self.PORT: int = env.int('PORT', default=8008)
        # Database
        self.DB_URL: str = env.str("DB_URL", "sqlite+aiosqlite:///./family_weight.db")
        self.TEST_DB_URL: str = env.str("TEST_DB_URL", "")

        # App
        self.DEBUG: bool = env.bool("DEBUG", False)

        # API Authentication
        self.API_KEY: str = env.str("API_KEY", "family-weight-local-api-key")

        # SENTRY
        self.SENTRY_DSN: str = env.str("SENTRY_DSN", "")

        # Statistics
        self.TREND_PERIOD_DAYS: int = env.int("TREND_PERIOD_DAYS", default=30)
        self.RECENT_RECORDS_LIMIT: int = env.int("RECENT_RECORDS_LIMIT", default=100)
        self.DASHBOARD_RECENT_LIMIT: int = env.int("DASHBOARD_RECENT_LIMIT", default=5)

        # Import
        self.MAX_IMPORT_MEMBERS: int = env.int("MAX_IMPORT_MEMBERS", default=50)


AppConfig = Settings()
