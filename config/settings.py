"""Configuration management using pydantic-settings."""
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from SIMRAIL_* environment variables."""

    # Remote endpoints
    live_data_url: str = "https://panel.simrail.eu:8084"
    timetable_url: str = "https://api1.aws.simrail.eu:8082/api"

    # Request timeout in seconds
    request_timeout: float = 30

    # Default server for automatic updates
    auto_update_server: Optional[str] = None

    # Logging (used by the command line watcher)
    log_level: str = "INFO"

    class Config:
        env_prefix = "SIMRAIL_"
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
