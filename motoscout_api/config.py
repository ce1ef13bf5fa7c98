"""
API configuration and settings management.
"""
import os

from motoscout.config import config as core_config


class Config:
    """Application configuration."""

    # API settings
    API_TITLE: str = "MotoScout API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "REST API for motorcycle listings aggregated from AutoScout24 and Subito.it"

    # CORS settings
    CORS_ORIGINS: list = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list = ["*"]
    CORS_ALLOW_HEADERS: list = ["*"]

    # Credential slot shared with the CLI
    CREDENTIALS_PATH: str = core_config.CREDENTIALS_PATH

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FILE_PATH: str = os.getenv("API_LOG_FILE", "api.log")


# Global config instance
config = Config()
