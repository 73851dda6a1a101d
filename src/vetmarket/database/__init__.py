"""
Database connection and session management.

This module provides async SQLAlchemy engine configuration, session management
and portable column types for the marketplace backend.
"""

from .connection import DatabaseConfig, create_engine
from .session import SessionManager
from .types import JSONType, value_enum

__all__ = [
    # Connection utilities
    "DatabaseConfig",
    "create_engine",
    # Session management
    "SessionManager",
    # Column types
    "JSONType",
    "value_enum",
]
