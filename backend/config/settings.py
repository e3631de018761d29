"""
Centralized Settings Management using Pydantic Settings
Service configuration with environment variable support.
"""

import logging
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Use .env file for local development.
    """

    # Application
    APP_NAME: str = "Jordan Yells Form Coach API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = Field(default=False, description="Enable debug mode")
    ENVIRONMENT: str = Field(default="development", description="Environment: development, staging, production")

    # CORS
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed origins"
    )
    CORS_ALLOW_CREDENTIALS: bool = False

    # Rate Limiting (frames are sampled at about 1 per second)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_ANALYZE: str = "120/minute"
    RATE_LIMIT_SHOTS: str = "60/minute"
    RATE_LIMIT_GLOBAL: str = "2000/hour"

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="DEBUG, INFO, WARNING, ERROR, CRITICAL")
    LOG_JSON: bool = Field(default=False, description="Emit JSON logs")
    LOG_FILE: Optional[str] = Field(default=None, description="Optional JSON log file")

    # Shot history
    MAX_SHOT_HISTORY: int = Field(default=500, gt=0, description="Shots kept in memory")
    AUTO_SAVE_SHOTS: bool = Field(default=True, description="Record every completed analysis as a shot")
    DAILY_SHOT_GOAL: int = Field(default=50, gt=0, description="Shots per day goal")

    @property
    def allowed_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.ENVIRONMENT.lower() == "production"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name"""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore"
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache for performance - settings are loaded once.
    """
    return Settings()


# Convenience function for direct access
settings = get_settings()
