import logging
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from betnorm.models.enums import AmbiguityPolicy


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Local Persistence
    data_dir: Path = Field(
        Path(".betnorm"), description="Directory for JSON collection files."
    )
    seed_reference_data: bool = Field(
        True,
        description="Seed teams and bet types from built-in data when storage is empty.",
    )

    # Resolution Settings
    unresolved_bucket: str = Field(
        "[Unresolved]",
        min_length=1,
        description="Aggregation bucket used for values that do not resolve.",
    )
    ambiguity_policy: AmbiguityPolicy = Field(
        AmbiguityPolicy.UNRESOLVED_BUCKET,
        description="How aggregation keys treat ambiguous values.",
    )
    max_sample_contexts: int = Field(
        3, ge=1, description="Sample contexts kept per grouped queue item."
    )

    # Supabase Configuration (optional remote collection store)
    supabase_url: Optional[str] = Field(None, description="URL for the Supabase project.")
    supabase_key: Optional[str] = Field(None, description="Key for the Supabase project.")
    supabase_table: str = Field(
        "normalization_collections",
        description="Table holding one row per persisted collection.",
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_prefix="BETNORM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
