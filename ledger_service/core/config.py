"""
Configuration settings for the ledger service.
Loads environment variables and provides application settings.
"""

from decimal import Decimal
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # Database
    DATABASE_URL: str
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    PASSWORD_HASH_ITERATIONS: int = 200_000

    # Ledger rules
    OPENING_BALANCE: Decimal = Decimal("5000.00")
    MAX_ACCOUNTS_PER_USER: int = 4
    ACCOUNT_NUMBER_MAX_ATTEMPTS: int = 5
    TRANSFER_TIMEOUT_MS: int = 5000

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    # API
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Ledger Service"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "Account ledger API: user accounts, atomic fund transfers and transaction history"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


# Create global settings instance
settings = Settings()
