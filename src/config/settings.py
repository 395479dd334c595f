"""
Configuration Management for Kameti Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here, so it is easy to see which external
dependencies exist. Ledger data itself is never configured or persisted;
only the insights service and a few display defaults are.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiSettings(BaseSettings):
    """Gemini text-generation configuration (insights panel)."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: str = Field(
        ...,
        description="Gemini API key"
    )
    model_name: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model to use"
    )
    max_tokens: int = Field(
        default=512,
        ge=64,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Model temperature"
    )


class LedgerSettings(BaseSettings):
    """Ledger display and preference settings."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    organization_name: str = Field(
        default="LedgerPro",
        min_length=1,
        description="Name shown in the sidebar"
    )
    currency_symbol: str = Field(
        default="Rs.",
        min_length=1,
        description="Fixed currency symbol used everywhere amounts are shown"
    )
    preferences_path: Path = Field(
        default=Path(".ledger_preferences.json"),
        description="JSON file holding local UI preferences"
    )
    insights_recent_count: int = Field(
        default=5,
        ge=0,
        le=50,
        description="How many recent transactions are sent with the insights prompt"
    )
    top_contributors: int = Field(
        default=5,
        ge=1,
        le=50,
        description="How many members the dashboard ranks"
    )

    @field_validator('currency_symbol')
    @classmethod
    def strip_currency_symbol(cls, v: str) -> str:
        """Currency symbols are rendered verbatim, so trim stray whitespace."""
        return v.strip()


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

    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for the structured log"
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

    # Sub-settings load lazily so a missing Gemini key does not stop the ledger

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

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


def validate_all_settings() -> dict[str, bool | str]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every section that failed.
    """
    results: dict[str, bool | str] = {}
    settings = get_settings()

    for name in ("gemini", "ledger", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
