"""Application configuration."""

import os

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Storage
    storage_path: str = os.getenv("STORAGE_PATH", "data/bingo.db")
    image_dir: str = os.getenv("IMAGE_DIR", "static/images")

    # Goals
    default_goal_duration_days: int = int(
        os.getenv("DEFAULT_GOAL_DURATION_DAYS", "365")
    )  # new goals run for a year

    # Server
    server_host: str = os.getenv("SERVER_HOST", "127.0.0.1")
    server_port: int = int(os.getenv("SERVER_PORT", "8000"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = False


settings = Settings()
