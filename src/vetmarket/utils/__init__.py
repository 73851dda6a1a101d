"""
Utility functions and helper modules.

This module provides common utility functions for datetime handling,
validation, configuration management and credential handling.
"""

from .config import (
    AppSettings,
    ConfigError,
    DatabaseURLValidator,
    EnvironmentConfig,
    LoggingConfigurator,
    LogLevel,
)
from .datetime_utils import (
    TIME_PATTERN,
    ensure_utc,
    get_current_utc,
    is_valid_time_string,
    minutes_since,
    parse_iso_datetime,
    schedule_day_index,
    time_to_minutes,
)
from .validation import (
    ValidationError,
    ValidationResult,
    parse_csv_list,
    sanitize_string,
    validate_email,
    validate_zip_code,
)

__all__ = [
    # Configuration
    "AppSettings",
    "ConfigError",
    "DatabaseURLValidator",
    "EnvironmentConfig",
    "LoggingConfigurator",
    "LogLevel",
    # Datetime utilities
    "TIME_PATTERN",
    "ensure_utc",
    "get_current_utc",
    "is_valid_time_string",
    "minutes_since",
    "parse_iso_datetime",
    "schedule_day_index",
    "time_to_minutes",
    # Validation utilities
    "ValidationError",
    "ValidationResult",
    "parse_csv_list",
    "sanitize_string",
    "validate_email",
    "validate_zip_code",
]
