"""
Application configuration.

Settings come from environment variables or a ``.env`` file.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Math Study API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list[str] = ["*"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]

    # Grading
    MAX_RETRIES: int = 2
    CORRECTION_POLICY: str = "0"  # 0, 1, 0.5 or half_n
    HINT_DEDUCTION: float = 0.25
    DEFAULT_AUTOMATION_DEDUCTION: float = 0.5

    # Storage
    PROBLEMS_FILE: str = "problems.json"
    PROGRESS_FILE: str = "progress.json"

    # Authorization
    DISPUTE_TOKEN: Optional[str] = None  # disputes are refused when unset

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or text
    LOG_FILE: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()
