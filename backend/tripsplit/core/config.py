"""
Application configuration and environment settings.
"""
from decimal import Decimal
from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Union


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "TripSplit"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000", "http://localhost:5173"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # Money
    DEFAULT_CURRENCY: str = "TWD"
    CURRENCY_PRECISION: int = 2  # Decimal places of the minor currency unit
    SPLIT_TOLERANCE: Decimal = Decimal("0.01")  # Allowed gap between custom splits and the expense amount
    SETTLEMENT_EPSILON: Decimal = Decimal("0.01")  # Allowed gap between total paid and total owed

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
