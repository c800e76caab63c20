"""
Configuration management for DocDig.

Uses Pydantic Settings for type-safe configuration loading from environment variables.
The build tool supplies the native staging inputs (OUT_DIR, CARGO_MANIFEST_DIR,
CARGO_CFG_TARGET_OS); DOC_DIG_* variables take precedence when set.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class ConfigurationError(Exception):
    """Raised when a required configuration value is missing or unusable."""

    def __init__(self, setting: str, message: str | None = None):
        self.setting = setting
        super().__init__(message or f"Missing or invalid configuration for '{setting}'")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Native staging paths are optional at load time so that extraction-only
    commands work outside a build; the staging entry points check for them.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ==========================================================================
    # Build Tool Inputs
    # ==========================================================================
    out_dir: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("DOC_DIG_OUT_DIR", "OUT_DIR"),
        description="Output directory of the current native build invocation",
    )

    manifest_dir: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("DOC_DIG_MANIFEST_DIR", "CARGO_MANIFEST_DIR"),
        description="Manifest directory of the native sub-crate",
    )

    target_os: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DOC_DIG_TARGET_OS", "CARGO_CFG_TARGET_OS"),
        description="Target operating system; the host platform when unset",
    )

    # ==========================================================================
    # Staging Configuration
    # ==========================================================================
    staging_dir: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("DOC_DIG_STAGING_DIR"),
        description="Runtime staging directory; derived from manifest_dir when unset",
    )

    artifact_stem: str = Field(
        default="libtika_native",
        min_length=1,
        validation_alias=AliasChoices("DOC_DIG_ARTIFACT_STEM"),
        description="File stem of the primary shared library",
    )

    dependency_prefix: str = Field(
        default="extractous-",
        min_length=1,
        validation_alias=AliasChoices("DOC_DIG_DEPENDENCY_PREFIX"),
        description="Directory prefix of the upstream dependency's build output",
    )

    # ==========================================================================
    # Extraction Configuration
    # ==========================================================================
    ocr_language: str = Field(
        default="eng",
        min_length=1,
        validation_alias=AliasChoices("DOC_DIG_OCR_LANGUAGE"),
        description="Default Tesseract language code for OCR extraction",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices("DOC_DIG_LOG_LEVEL"),
        description="Minimum level for stderr logging",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: object) -> object:
        """Normalize the log level name before checking it is a known level."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def resolve_staging_dir(self) -> Path:
        """
        Resolve the runtime staging directory.

        The conventional location is `priv/native/` under the project root,
        two levels above the native sub-crate's manifest directory.

        Returns:
            The staging directory path (not necessarily existing yet).

        Raises:
            ConfigurationError: If neither staging_dir nor manifest_dir is set.
        """
        if self.staging_dir is not None:
            return self.staging_dir

        if self.manifest_dir is None:
            raise ConfigurationError(
                "manifest_dir",
                "Cannot determine the staging directory: set DOC_DIG_STAGING_DIR "
                "or CARGO_MANIFEST_DIR",
            )

        return self.manifest_dir.parent.parent / "priv" / "native"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.
    """
    return Settings()
