"""
Configuration management for Student Hours Finder.

This module provides environment-based configuration using Pydantic BaseSettings,
so the search engine's fixed conventions (column aliases, sentinel labels,
excluded folders, size limits) can be adjusted per deployment without touching
core logic.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from student_hours.domain.student_records.constants import (
    DEFAULT_CATEGORY_A_LABEL,
    DEFAULT_CATEGORY_B_LABEL,
    DEFAULT_IDENTIFIER_ALIASES,
    DEFAULT_IGNORED_VALUES,
    DEFAULT_PENDING_REVIEW_MARKER,
)

# Determine project root for resolving .env by default
PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"
ENV_FILE_OVERRIDE = os.getenv("SHF_ENV_FILE")
if ENV_FILE_OVERRIDE:
    env_file_candidate = Path(ENV_FILE_OVERRIDE).expanduser()
    if not env_file_candidate.is_absolute():
        env_file_candidate = PROJECT_ROOT / env_file_candidate
    SETTINGS_ENV_FILE = env_file_candidate
else:
    SETTINGS_ENV_FILE = DEFAULT_ENV_FILE


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Environment variables are automatically loaded with the SHF_ prefix.
    For example, SHF_MAX_FILE_SIZE_MB=50 lowers the workbook size limit.
    LOG_LEVEL is read without prefix.
    """

    LOG_LEVEL: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level (uppercase)",
    )

    app_name: str = Field(default="StudentHoursFinder", description="Application name")

    # Folder selection
    default_root: Optional[str] = Field(
        default=None,
        description="Folder searched when the caller does not provide one",
    )

    # File discovery
    excel_extensions: List[str] = Field(
        default=[".xlsx", ".xls"],
        description="Spreadsheet extensions eligible for scanning",
    )
    excluded_dirs: List[str] = Field(
        default=["node_modules", "dist", "build", "__pycache__"],
        description="Directory names never descended into (case-insensitive)",
    )
    lock_file_marker: str = Field(
        default="~$", description="Marker used by spreadsheet editors for lock files"
    )

    # Workbook validation
    max_file_size_mb: int = Field(
        default=100, description="Maximum workbook size to process (MB)"
    )

    # Sheet layout conventions
    identifier_aliases: List[str] = Field(
        default=list(DEFAULT_IDENTIFIER_ALIASES),
        description="Header aliases of the student identifier column",
    )
    category_a_label: str = Field(
        default=DEFAULT_CATEGORY_A_LABEL,
        description="Sentinel header opening the co-curricular region",
    )
    category_b_label: str = Field(
        default=DEFAULT_CATEGORY_B_LABEL,
        description="Sentinel header opening the leadership region",
    )
    pending_review_marker: str = Field(
        default=DEFAULT_PENDING_REVIEW_MARKER,
        description="Headers containing this phrase get their cell comment appended",
    )
    ignored_cell_values: List[str] = Field(
        default=list(DEFAULT_IGNORED_VALUES),
        description="Placeholder cell values treated as empty (numeric zero always is)",
    )

    @field_validator("excel_extensions")
    @classmethod
    def _normalize_extensions(cls, value: List[str]) -> List[str]:
        normalized = []
        for ext in value:
            ext = ext.strip().lower()
            if ext and not ext.startswith("."):
                ext = f".{ext}"
            if ext:
                normalized.append(ext)
        return normalized

    @field_validator("excluded_dirs", "identifier_aliases")
    @classmethod
    def _lowercase_names(cls, value: List[str]) -> List[str]:
        return [item.strip().lower() for item in value if item.strip()]

    model_config = SettingsConfigDict(
        env_prefix="SHF_",
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are loaded once and reused across
    the application lifecycle. Tests that change the environment should call
    ``get_settings.cache_clear()``.

    Returns:
        Configured Settings instance
    """
    return Settings()
