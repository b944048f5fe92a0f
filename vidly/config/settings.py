"""
Vidly Rental Management
Centralized Configuration Management

This module provides configuration management for the rental core using Pydantic
settings with environment variable support, validation, and type safety.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RentalSettings(BaseSettings):
    """Rental Pricing and Lifecycle Configuration"""

    model_config = SettingsConfigDict(
        env_prefix="RENTAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    late_fee_per_day: Decimal = Field(
        default=Decimal("1.50"),
        ge=0,
        description="Flat late fee charged per day past the due date",
    )
    default_rental_days: int = Field(default=7, ge=1, description="Rental period when no due date is given")
    default_daily_rate: Decimal = Field(
        default=Decimal("3.99"),
        gt=0,
        description="Daily rate applied when a checkout does not set one",
    )


class AnalyticsSettings(BaseSettings):
    """Dashboard, Recommendation and Report Configuration"""

    model_config = SettingsConfigDict(
        env_prefix="ANALYTICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    top_count: int = Field(default=5, ge=1, description="Entries in top movie/customer rankings")
    recent_rentals_count: int = Field(default=10, ge=1, description="Rentals shown in the recent list")
    trend_months: int = Field(default=6, ge=1, description="Months in trailing trend series")
    default_recommendations: int = Field(default=10, ge=1, description="Default recommendation count")
    popular_watchlist_limit: int = Field(default=10, ge=1, description="Default most-watchlisted limit")


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format: json or text")

    @field_validator("log_format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format value"""
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="vidly", description="Application name")
    app_env: str = Field(default="development", description="Environment")
    debug: bool = Field(default=False, description="Debug mode")
    seed_sample_data: bool = Field(default=True, description="Load the sample catalogue on startup")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    rentals: RentalSettings = Field(default_factory=RentalSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running under the test suite"""
        return self.app_env == "testing"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()


def resolve_rental_settings(rental_settings: Optional[RentalSettings] = None) -> RentalSettings:
    """Return the given rental settings or the cached application defaults."""
    return rental_settings or get_settings().rentals


def resolve_analytics_settings(analytics_settings: Optional[AnalyticsSettings] = None) -> AnalyticsSettings:
    """Return the given analytics settings or the cached application defaults."""
    return analytics_settings or get_settings().analytics
