"""
Configuration Management for WealthGrows

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local ledger storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WEALTHGROWS_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path(".wealthgrows"),
        description="Directory holding the persisted collections"
    )

    # Collection names (one JSON document each)
    transactions_key: str = Field(
        default="wealthgrows_transactions",
        description="Name of the transactions collection"
    )
    categories_key: str = Field(
        default="wealthgrows_categories",
        description="Name of the categories collection"
    )
    audit_log_name: str = Field(
        default="wealthgrows_audit.jsonl",
        description="File name of the append-only audit log"
    )

    io_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a read/write before the store is reported unavailable"
    )

    @field_validator('transactions_key', 'categories_key')
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Collection names become file names, so no path separators."""
        if not v or "/" in v or "\\" in v:
            raise ValueError(f"Invalid collection name: {v!r}")
        return v


class GeminiSettings(BaseSettings):
    """Gemini LLM configuration."""

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
        default=2048,
        ge=100,
        le=8192,
        description="Maximum tokens in response"
    )
    # The analyst persona benefits from some variety
    temperature: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Model temperature (lower = more deterministic)"
    )


class ReportSettings(BaseSettings):
    """Financial report payload configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WEALTHGROWS_REPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    sample_size: int = Field(
        default=30,
        ge=1,
        le=200,
        description="Maximum number of transactions included in a report request"
    )
    language: str = Field(
        default="English",
        description="Language the analyst should answer in"
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

    log_level: str = Field(
        default="INFO",
        description="Log level for the local structured log"
    )
    audit_enabled: bool = Field(
        default=True,
        description="Persist audit events next to the ledger"
    )

    # Sanity limit for a single entry
    max_transaction_amount: float = Field(
        default=100000000.0,
        gt=0,
        description="Largest amount accepted for one transaction"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


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

    # Note: These are loaded lazily to allow partial configuration

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

    @property
    def report(self) -> ReportSettings:
        return ReportSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "gemini", "report", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
