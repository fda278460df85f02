"""
Configuration module for readinglog.

This module defines the Settings class, which loads environment variables
and provides application-wide configuration: the database URL, the optional
Google Books API key, metadata enrichment switches and the log level.

Usage:
    Import the `settings` object to access configuration throughout the project.
"""

import logging
import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        DATABASE_URL (str): Database connection string.
        GOOGLE_BOOKS_API_KEY (str): Optional key for the Google Books API. Empty means anonymous access.
        ENRICHMENT_ENABLED (bool): Whether new entries are auto-filled from the metadata lookup.
        LOOKUP_TIMEOUT (float): Timeout in seconds for each metadata lookup request.
        ENVIRONMENT (str): Current environment (e.g., 'production', 'development').
        LOG_LEVEL (str): Logging level name used by the entry points.
    """
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./readinglog.db")
    GOOGLE_BOOKS_API_KEY: str = os.getenv("GOOGLE_BOOKS_API_KEY", "")
    ENRICHMENT_ENABLED: bool = True
    LOOKUP_TIMEOUT: float = 10.0
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def log_level(self) -> int:
        """
        Returns the numeric logging level for LOG_LEVEL, falling back to INFO.
        """
        return getattr(logging, self.LOG_LEVEL.upper(), logging.INFO)

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
