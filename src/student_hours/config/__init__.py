"""Configuration management for Student Hours Finder.

This module provides centralized configuration loaded from environment variables
with validation using Pydantic BaseSettings.

Usage:
    >>> from student_hours.config import get_settings
    >>> settings = get_settings()
    >>> settings.max_file_size_mb
    100
"""

from student_hours.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
