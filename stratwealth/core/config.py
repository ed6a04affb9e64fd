"""
Centralized application configuration implementing the 12-Factor App methodology.
Every tunable is an environment variable; defaults target local development.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Immutable configuration schema backed by environment variables."""

    APP_NAME: str = "StratWealth"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Any SQLAlchemy URL (PostgreSQL in production, SQLite locally)
    DATABASE_URL: str = "sqlite:///./stratwealth.db"

    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    # 7 days
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080
    # Where browser requests without a valid session are sent
    LOGIN_REDIRECT_URL: str = "/docs"

    LOG_LEVEL: str = "INFO"

    CURRENCY: str = "USD"

    # Property installment plans
    MIN_PROPERTY_INSTALLMENTS: int = 2
    MAX_PROPERTY_INSTALLMENTS: int = 12

    # Upper bound for /terms/schedule (30 years of monthly payments)
    MAX_SCHEDULE_INSTALLMENTS: int = 360

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
