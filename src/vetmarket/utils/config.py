"""
Configuration management utilities.

This module provides environment variable handling with type conversion,
database URL validation, logging configuration utilities and the
application settings object consumed by the API factory.
"""

import logging
import logging.config
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from urllib.parse import parse_qs, urlparse

from ..exceptions import ConfigurationException


class ConfigError(ConfigurationException):
    """Exception raised for configuration-related errors."""


class LogLevel(Enum):
    """Enumeration for log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentConfig:
    """Utility class for handling environment variables with type conversion."""

    @staticmethod
    def get_str(
        key: str, default: Optional[str] = None, required: bool = False
    ) -> Optional[str]:
        """
        Get a string environment variable.

        Args:
            key: Environment variable key
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            String value or default

        Raises:
            ConfigError: If required variable is missing
        """
        value = os.getenv(key, default)

        if required and value is None:
            raise ConfigError(
                f"Required environment variable '{key}' is not set", config_key=key
            )

        return value

    @staticmethod
    def get_int(
        key: str, default: Optional[int] = None, required: bool = False
    ) -> Optional[int]:
        """
        Get an integer environment variable.

        Args:
            key: Environment variable key
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            Integer value or default

        Raises:
            ConfigError: If required variable is missing or invalid
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(
                    f"Required environment variable '{key}' is not set",
                    config_key=key,
                )
            return default

        try:
            return int(value)
        except ValueError:
            raise ConfigError(
                f"Environment variable '{key}' must be an integer, got: {value}",
                config_key=key,
                config_value=value,
            )

    @staticmethod
    def get_bool(
        key: str, default: Optional[bool] = None, required: bool = False
    ) -> Optional[bool]:
        """
        Get a boolean environment variable.

        Args:
            key: Environment variable key
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            Boolean value or default

        Raises:
            ConfigError: If required variable is missing
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(
                    f"Required environment variable '{key}' is not set",
                    config_key=key,
                )
            return default

        return value.lower() in ("true", "1", "yes", "on", "enabled")

    @staticmethod
    def get_list(
        key: str,
        separator: str = ",",
        default: Optional[List[str]] = None,
        required: bool = False,
    ) -> List[str]:
        """
        Get a list environment variable.

        Args:
            key: Environment variable key
            separator: Separator character for list items
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            List of strings or default

        Raises:
            ConfigError: If required variable is missing
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(
                    f"Required environment variable '{key}' is not set",
                    config_key=key,
                )
            return list(default or [])

        return [item.strip() for item in value.split(separator) if item.strip()]


class DatabaseURLValidator:
    """Utility class for validating database URLs."""

    SUPPORTED_DRIVERS = {
        "postgresql": ["postgresql", "postgresql+asyncpg"],
        "sqlite": ["sqlite", "sqlite+aiosqlite"],
    }

    @classmethod
    def validate_url(cls, url: str) -> Dict[str, Any]:
        """
        Validate a database URL and return parsed components.

        Args:
            url: Database URL to validate

        Returns:
            Dictionary with validation results and parsed components

        Raises:
            ConfigError: If URL is invalid
        """
        if not url:
            raise ConfigError("Database URL cannot be empty", config_key="DATABASE_URL")

        parsed = urlparse(url)

        if not parsed.scheme:
            raise ConfigError(
                "Database URL must include a scheme (e.g., postgresql://)",
                config_key="DATABASE_URL",
            )

        supported = [
            driver for drivers in cls.SUPPORTED_DRIVERS.values() for driver in drivers
        ]
        if parsed.scheme not in supported:
            raise ConfigError(
                f"Unsupported database driver '{parsed.scheme}'. Supported: {', '.join(supported)}",
                config_key="DATABASE_URL",
            )

        is_sqlite = parsed.scheme.startswith("sqlite")
        if not is_sqlite and not parsed.hostname:
            raise ConfigError(
                "Database URL must include a hostname", config_key="DATABASE_URL"
            )

        if not is_sqlite and not parsed.path.lstrip("/"):
            raise ConfigError(
                "Database URL must include a database name", config_key="DATABASE_URL"
            )

        return {
            "valid": True,
            "scheme": parsed.scheme,
            "hostname": parsed.hostname,
            "port": parsed.port,
            "database": parsed.path.lstrip("/") if parsed.path else "",
            "username": parsed.username,
            "query": dict(parse_qs(parsed.query)),
        }


class LoggingConfigurator:
    """Utility class for configuring logging."""

    DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @staticmethod
    def configure_basic_logging(
        level: Union[str, LogLevel] = LogLevel.INFO,
        format_string: Optional[str] = None,
        log_file: Optional[str] = None,
    ) -> None:
        """
        Configure basic logging for the application.

        Args:
            level: Logging level
            format_string: Custom format string
            log_file: Optional log file path
        """
        if isinstance(level, LogLevel):
            level = level.value

        basic_config_args: Dict[str, Any] = {
            "level": level,
            "format": format_string or LoggingConfigurator.DEFAULT_FORMAT,
            "datefmt": "%Y-%m-%d %H:%M:%S",
        }
        if log_file:
            basic_config_args["filename"] = log_file
            basic_config_args["filemode"] = "a"

        logging.basicConfig(**basic_config_args)

    @staticmethod
    def configure_structured_logging(
        config_dict: Optional[Dict[str, Any]] = None,
        config_file: Optional[str] = None,
        level: Union[str, LogLevel] = LogLevel.INFO,
    ) -> None:
        """
        Configure structured logging using a dictionary or file.

        Args:
            config_dict: Logging configuration dictionary
            config_file: Path to logging configuration file
            level: Level for the ``vetmarket`` logger when using the default config
        """
        if isinstance(level, LogLevel):
            level = level.value

        if config_file and Path(config_file).exists():
            logging.config.fileConfig(config_file, disable_existing_loggers=False)
        elif config_dict:
            logging.config.dictConfig(config_dict)
        else:
            default_config = {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "standard": {"format": LoggingConfigurator.DEFAULT_FORMAT},
                    "detailed": {
                        "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s - %(message)s"
                    },
                },
                "handlers": {
                    "console": {
                        "class": "logging.StreamHandler",
                        "level": level,
                        "formatter": "standard",
                        "stream": "ext://sys.stdout",
                    }
                },
                "loggers": {
                    "vetmarket": {
                        "level": level,
                        "handlers": ["console"],
                        "propagate": False,
                    }
                },
                "root": {"level": "WARNING", "handlers": ["console"]},
            }
            logging.config.dictConfig(default_config)


DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./vetmarket.db"
DEFAULT_JWT_EXPIRES_MINUTES = 60 * 24 * 30


@dataclass
class AppSettings:
    """Runtime settings for the API application."""

    database_url: str = DEFAULT_DATABASE_URL
    jwt_secret: str = "change-me"  # nosec B105
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = DEFAULT_JWT_EXPIRES_MINUTES
    session_timeout_enforced: bool = True
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = LogLevel.INFO.value
    db_echo: bool = False
    auto_create_tables: bool = False
    environment: str = "development"

    def __post_init__(self) -> None:
        DatabaseURLValidator.validate_url(self.database_url)
        if self.environment == "production" and self.jwt_secret == "change-me":
            raise ConfigError(
                "JWT_SECRET must be set in production", config_key="JWT_SECRET"
            )

    @classmethod
    def from_environment(cls) -> "AppSettings":
        """
        Build settings from environment variables.

        Returns:
            Settings populated from ``DATABASE_URL``, ``JWT_SECRET`` and friends

        Raises:
            ConfigError: If a variable has an invalid value
        """
        return cls(
            database_url=EnvironmentConfig.get_str(
                "DATABASE_URL", DEFAULT_DATABASE_URL
            ),
            jwt_secret=EnvironmentConfig.get_str("JWT_SECRET", "change-me"),
            jwt_algorithm=EnvironmentConfig.get_str("JWT_ALGORITHM", "HS256"),
            jwt_expires_minutes=EnvironmentConfig.get_int(
                "JWT_EXPIRES_MINUTES", DEFAULT_JWT_EXPIRES_MINUTES
            ),
            session_timeout_enforced=EnvironmentConfig.get_bool(
                "SESSION_TIMEOUT_ENFORCED", True
            ),
            cors_origins=EnvironmentConfig.get_list("CORS_ORIGINS", default=["*"]),
            log_level=EnvironmentConfig.get_str("LOG_LEVEL", LogLevel.INFO.value).upper(),
            db_echo=EnvironmentConfig.get_bool("DB_ECHO", False),
            auto_create_tables=EnvironmentConfig.get_bool("AUTO_CREATE_TABLES", False),
            environment=EnvironmentConfig.get_str("APP_ENV", "development"),
        )
