"""Configuration for Bankline."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Client settings."""

    # Backend
    api_url: str = "http://localhost:8080"
    fallback_api_url: Optional[str] = None  # Secondary source for balance/history

    # Timeout tiers (seconds)
    base_timeout: float = 10.0
    extended_timeout: float = 15.0  # Retry budget for slow reads
    transfer_timeout: float = 20.0  # Retry budget for transfers

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
