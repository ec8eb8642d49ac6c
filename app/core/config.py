# app/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./inventory.db"
    CREATE_TABLES_ON_STARTUP: bool = False

    # Inventory
    LOW_STOCK_THRESHOLD: int = 10

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    WRITE_RATE_LIMIT: str = "60/minute"

    # Frontend
    CORS_ORIGINS: list[str] = [
        "http://127.0.0.1:5500",
        "http://localhost:5500",
    ]

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
    )


settings = Settings()
