"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # SUPABASE
    # ===================
    supabase_url: Optional[str] = Field(
        None,
        description="Supabase project URL"
    )
    supabase_key: Optional[str] = Field(
        None,
        description="Supabase anon/public key"
    )

    # ===================
    # AI
    # ===================
    anthropic_api_key: Optional[str] = Field(
        None,
        description="Anthropic API key for mood and insight generation"
    )
    ai_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Model used for mood and insight generation"
    )
    ai_max_tokens: int = Field(
        default=500,
        ge=50,
        le=4096,
        description="Maximum tokens per AI response"
    )

    # ===================
    # INVENTORY OPTIMIZATION
    # ===================
    default_max_stock: int = Field(
        default=10000,
        ge=1,
        description="Max stock used when a record has none (or zero)"
    )
    top_recommendations_limit: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Number of ranked recommendations returned by default"
    )

    # ===================
    # CALENDAR & LOCALE
    # ===================
    display_timezone: str = Field(
        default="UTC",
        description="IANA timezone used to assign schedule entries to calendar days"
    )
    base_currency: str = Field(
        default="ZAR",
        pattern="^[A-Z]{3}$",
        description="Currency that product prices are stored in"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def database_configured(self) -> bool:
        """Check if Supabase credentials are present."""
        return bool(self.supabase_url and self.supabase_key)

    @property
    def ai_configured(self) -> bool:
        """Check if the AI provider is configured."""
        return bool(self.anthropic_api_key)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
