"""
Configuration Management for Age of Money

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The FIFO core never reads settings itself; the orchestrator passes the
values in. This keeps the algorithm testable without an environment.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Where the ledger snapshot is read from."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: str = Field(
        default="data",
        description="Directory holding the YNAB API JSON exports"
    )
    budget_name: Optional[str] = Field(
        default=None,
        description="Name of the budget to compute (required if there are several)"
    )

    @field_validator('data_dir')
    @classmethod
    def validate_data_dir(cls, v: str) -> str:
        """Warn if the data directory doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Ledger data directory not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class AgingSettings(BaseSettings):
    """Tunables for the age-of-money computation."""

    model_config = SettingsConfigDict(
        env_prefix="AGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    include_scheduled_income: bool = Field(
        default=False,
        description="Add scheduled income as future buckets when projecting"
    )
    threshold_max_buckets: int = Field(
        default=25,
        ge=1,
        le=500,
        description="Maximum number of upcoming spending thresholds to list"
    )
    threshold_max_amount: int = Field(
        default=20_000_000,
        ge=0,
        description="Stop listing thresholds past this cumulative amount (milliunits)"
    )
    drop_deleted: bool = Field(
        default=True,
        description="Ignore records the API marks as deleted"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Presentation
    currency_symbol: str = Field(
        default="$",
        max_length=3,
        description="Symbol printed in front of amounts"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def aging(self) -> AgingSettings:
        return AgingSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for each section that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("ledger", "aging", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
