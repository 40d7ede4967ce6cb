from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from invoicedesk.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "invoicedesk"
    version: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # MySQL connection parameters, all four are required at first connection
    MYSQL_HOST: str = ""
    MYSQL_PORT: int = 3306
    MYSQL_USER: str = ""
    MYSQL_PASSWORD: str = ""
    MYSQL_DATABASE: str = ""

    # Full SQLAlchemy URL, overrides the MYSQL_* values when set
    APP_DATABASE_DSN: str = ""

    # Pool sizing (ignored for SQLite)
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 3600

    # Listing and dashboard
    ITEMS_PER_PAGE: int = 6
    LATEST_INVOICES_LIMIT: int = 5
    CARD_DATA_WORKERS: int = 3
    INVOICES_PATH: str = "/dashboard/invoices"
    LISTING_CACHE_MAX_ENTRIES: int = 256

    # Simulated latency in seconds
    REVENUE_FETCH_DELAY: float = 3.0
    LATEST_INVOICES_FETCH_DELAY: float = 1.0

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    @property
    def database_dsn(self) -> str:
        """Return the SQLAlchemy URL for the configured database.

        Raises ConfigurationError when no DSN override is set and any of the
        four MySQL connection parameters is missing.
        """
        if self.APP_DATABASE_DSN:
            return self.APP_DATABASE_DSN

        required = {
            "MYSQL_HOST": self.MYSQL_HOST,
            "MYSQL_USER": self.MYSQL_USER,
            "MYSQL_PASSWORD": self.MYSQL_PASSWORD,
            "MYSQL_DATABASE": self.MYSQL_DATABASE,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigurationError(
                f"Missing database configuration: {', '.join(missing)}"
            )

        url = URL.create(
            "mysql+pymysql",
            username=self.MYSQL_USER,
            password=self.MYSQL_PASSWORD,
            host=self.MYSQL_HOST,
            port=self.MYSQL_PORT,
            database=self.MYSQL_DATABASE,
        )
        return url.render_as_string(hide_password=False)

    @property
    def is_sqlite(self) -> bool:
        return bool(self.APP_DATABASE_DSN) and self.APP_DATABASE_DSN.startswith("sqlite")


settings = Settings()
