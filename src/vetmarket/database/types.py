"""
Database-agnostic column types for vetmarket.

This module provides column types that work across PostgreSQL (production)
and SQLite (local development and tests).
"""

import enum
from typing import Any, List, Type

from sqlalchemy import JSON, Enum, TypeDecorator
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.engine import Dialect
from sqlalchemy.sql.type_api import TypeEngine


class JSONType(TypeDecorator):
    """
    Database-agnostic JSON column type.

    Uses JSONB for PostgreSQL and JSON for other databases (like SQLite).
    Date-only values inside stored documents (``date`` keys of special-date
    overrides) are normalised to ``YYYY-MM-DD`` strings on the way in.
    """

    impl = JSON
    cache_ok = True

    DATE_KEYS = ("date",)

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[Any]:
        """Load the appropriate JSON type based on the database dialect."""
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())

    def process_bind_param(self, value: Any, dialect: Dialect) -> Any:
        """Process value when storing to database."""
        if value is None:
            return None

        if isinstance(value, list):
            return [self._format_item(item) for item in value]
        if isinstance(value, dict):
            return self._format_item(value)
        return value

    def _format_item(self, item: Any) -> Any:
        if not isinstance(item, dict):
            return item

        formatted = item.copy()
        for key in self.DATE_KEYS:
            date_value = formatted.get(key)
            if hasattr(date_value, "isoformat"):
                date_value = date_value.isoformat()
            if isinstance(date_value, str) and "T" in date_value:
                # Keep just the date part
                date_value = date_value.split("T")[0]
            if date_value:
                formatted[key] = date_value
        return formatted


def enum_values(enum_cls: Type[enum.Enum]) -> List[str]:
    """Return the persisted strings for an enum class (its member values)."""
    return [member.value for member in enum_cls]


def value_enum(enum_cls: Type[enum.Enum], name: str) -> Enum:
    """
    Build an Enum column type that stores member values instead of names.

    API strings such as ``"Small Animal"`` or ``"Verified - Valid"`` are then
    identical to what is stored in the database.

    Args:
        enum_cls: Python enum class backing the column
        name: Name of the database enum type

    Returns:
        Configured SQLAlchemy Enum type
    """
    return Enum(
        enum_cls,
        name=name,
        values_callable=enum_values,
        validate_strings=True,
    )
