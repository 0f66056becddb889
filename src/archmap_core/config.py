"""
Configuration Management for archmap.

Provides type-safe configuration using Pydantic Settings for the ambient
concerns (cache location, logging) and a plain Pydantic model for the
analysis inputs handed over by the configuration collaborator.

License: MIT
"""

import re
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings


class ArchmapSettings(BaseSettings):
    """
    Centralized settings for the archmap runtime.

    Configuration is loaded with the following priority (highest to lowest):
    1. System environment variables (``ARCHMAP_`` prefix)
    2. .env file in the working directory
    3. Hardcoded default values

    Example:
        ```python
        from archmap_core.config import settings

        print(settings.cache_dir)      # e.g. PosixPath('/tmp')
        print(settings.cache_enabled)  # True
        ```
    """

    # ========================================
    # CACHE CONFIGURATION
    # ========================================

    cache_enabled: bool = Field(
        default=True, description="Reuse dependency maps persisted under cache_dir"
    )

    cache_dir: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()),
        description="Directory holding astmap.cache.<digest> artifacts",
    )

    # ========================================
    # COLLECTION CONFIGURATION
    # ========================================

    ignore_vcs_dirs: bool = Field(
        default=True, description="Skip .git, .svn, .hg and similar directories"
    )

    # ========================================
    # LOGGING CONFIGURATION
    # ========================================

    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_format: str = Field(default="json", description="Log format (json, console)")

    # ========================================
    # VALIDATORS
    # ========================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Validate log level is a recognized value.

        Args:
            v: Log level string

        Returns:
            Uppercase log level

        Raises:
            ValueError: If log level is invalid
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}, got '{v}'")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is json or console."""
        v_lower = v.lower()
        if v_lower not in {"json", "console"}:
            raise ValueError(f"log_format must be 'json' or 'console', got '{v}'")
        return v_lower

    # ========================================
    # PYDANTIC CONFIGURATION
    # ========================================

    model_config = {
        "env_prefix": "ARCHMAP_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "validate_assignment": True,
        "extra": "forbid",
    }


class AnalysisConfig(BaseModel):
    """
    Inputs of one map generation run.

    Attributes:
        paths: Root directories to collect source files from
        exclude_files: Regular expressions; a file whose full path matches any
            of them (case-insensitive search) is skipped
        file_suffix: Filename suffix of source files, including the dot
    """

    model_config = ConfigDict(frozen=True)

    paths: List[str] = Field(..., min_length=1, description="Root directories to analyze")
    exclude_files: List[str] = Field(
        default_factory=list, description="Exclusion regular expressions"
    )
    file_suffix: str = Field(default=".php", description="Source file suffix (e.g. '.php')")

    @field_validator("exclude_files")
    @classmethod
    def validate_exclude_files(cls, v: List[str]) -> List[str]:
        """Reject exclusion patterns that are not valid regular expressions."""
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"Invalid exclusion pattern '{pattern}': {exc}") from exc
        return v

    @field_validator("file_suffix")
    @classmethod
    def validate_file_suffix(cls, v: str) -> str:
        if not v.startswith(".") or len(v) < 2:
            raise ValueError(f"file_suffix must start with '.', got '{v}'")
        return v


# ============================================================
# HELPER FUNCTIONS
# ============================================================


def get_config_summary(settings: ArchmapSettings) -> Dict[str, Any]:
    """
    Get configuration summary for logging/debugging.

    Args:
        settings: ArchmapSettings instance

    Returns:
        Configuration summary grouped by category
    """
    return {
        "cache": {
            "enabled": settings.cache_enabled,
            "dir": str(settings.cache_dir),
        },
        "collection": {
            "ignore_vcs_dirs": settings.ignore_vcs_dirs,
        },
        "logging": {
            "level": settings.log_level,
            "format": settings.log_format,
        },
    }


# Singleton instance - instantiated once at module import
settings = ArchmapSettings()
