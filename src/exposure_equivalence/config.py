"""
Configuration management for the exposure equivalence engine.

Uses pydantic-settings for environment-based configuration with validation.
All settings can be overridden via environment variables with EXPEQ_ prefix.
"""

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from exposure_equivalence.core.types import IncrementGranularity

load_dotenv()


class ExposureSettings(BaseSettings):
    """Settings for stop arithmetic and request validation."""

    model_config = SettingsConfigDict(env_prefix="EXPEQ_EXPOSURE_")

    # Snapping and bound checks; small enough to separate third stops
    stop_tolerance: float = Field(default=1e-6, gt=0.0, le=0.01)

    # Request bounds
    max_ev_compensation: float = Field(default=5.0, ge=0.0, le=10.0)

    # Used when a caller does not name a granularity
    default_granularity: IncrementGranularity = Field(default=IncrementGranularity.THIRD)


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings."""

    model_config = SettingsConfigDict(
        env_prefix="EXPEQ_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application info
    app_name: str = Field(default="Exposure Equivalence Engine")
    log_level: str = Field(default="INFO")

    # Subsettings
    exposure: ExposureSettings = Field(default_factory=ExposureSettings)


# Global settings instance - lazy loaded
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(settings: Optional[Settings] = None, **kwargs) -> Settings:
    """
    Configure the global settings.

    Args:
        settings: Optional Settings instance to use directly
        **kwargs: Settings overrides

    Returns:
        The configured Settings instance
    """
    global _settings
    if settings is not None:
        _settings = settings
    elif kwargs:
        _settings = Settings(**kwargs)
    else:
        _settings = Settings()
    return _settings
