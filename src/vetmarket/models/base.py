"""
Base model class for all SQLAlchemy models in the vetmarket package.

This module provides the foundational base model class that all other models
inherit from, including UUID primary keys, audit timestamps and common
utility methods.

Example:
    >>> from vetmarket.models.base import BaseModel
    >>> from sqlalchemy.orm import Mapped, mapped_column
    >>> from sqlalchemy import String

    >>> class MyModel(BaseModel):
    ...     __tablename__ = "my_table"
    ...     name: Mapped[str] = mapped_column(String(100))

    >>> instance = MyModel(name="Test")
    >>> data = instance.to_dict()
    >>> print(data["name"])  # "Test"
"""

import enum
import uuid
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional, TypeVar

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

from ..utils.datetime_utils import get_current_utc

# Type variable for model classes
T = TypeVar("T", bound="BaseModel")


class Base(DeclarativeBase):
    """
    Base declarative class for all SQLAlchemy models.

    Maps ``uuid.UUID`` annotations to the portable ``Uuid`` type, which is
    native UUID on PostgreSQL and CHAR(32) on SQLite.
    """

    type_annotation_map = {
        uuid.UUID: Uuid(as_uuid=True),
    }


class BaseModel(Base):
    """
    Abstract base model class providing common functionality for all entities.

    - **UUID Primary Keys**: generated client-side with ``uuid.uuid4``
    - **Audit Fields**: creation and modification timestamps (UTC)
    - **Utility Methods**: dictionary conversion and bulk field updates

    Timestamps get a Python-side default as well as a server default, so the
    values are available on the instance right after a flush without an
    extra round trip (lazy refreshes are not allowed under asyncio).

    Attributes:
        id (UUID): Primary key, automatically generated UUID4
        created_at (datetime): Timestamp when record was created (UTC)
        updated_at (datetime): Timestamp when record was last updated (UTC)
    """

    __abstract__ = True

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=get_current_utc,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=get_current_utc,
        server_default=func.now(),
        onupdate=get_current_utc,
    )

    def __repr__(self) -> str:
        """
        Return string representation of the model instance.

        Returns:
            String in format: <ModelName(id=uuid)>
        """
        return f"<{self.__class__.__name__}(id={self.id})>"

    def to_dict(self, exclude: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """
        Convert model instance to dictionary representation.

        Converts all column values to JSON-serializable types:
        - datetime and date objects to ISO format strings
        - UUID objects to string representation
        - Enum members to their values
        - Other types remain unchanged

        Args:
            exclude: Column names to leave out (e.g. ``password_hash``)

        Returns:
            Dictionary with column names as keys and serialized values.
        """
        excluded = set(exclude or ())
        result = {}
        for column in self.__table__.columns:
            if column.key in excluded:
                continue
            value = getattr(self, column.key)
            if isinstance(value, (datetime, date)):
                result[column.key] = value.isoformat()
            elif isinstance(value, uuid.UUID):
                result[column.key] = str(value)
            elif isinstance(value, enum.Enum):
                result[column.key] = value.value
            else:
                result[column.key] = value
        return result

    def update_fields(self, **kwargs: Any) -> None:
        """
        Update multiple fields on the model instance in a single operation.

        Args:
            **kwargs: Field names as keys and new values as values.
                     Only existing model attributes can be updated.

        Raises:
            AttributeError: If any field name doesn't exist on the model.

        Note:
            This method only modifies the instance. You must commit the
            transaction to persist changes to the database.
        """
        for field, value in kwargs.items():
            if hasattr(self, field):
                setattr(self, field, value)
            else:
                raise AttributeError(
                    f"'{self.__class__.__name__}' has no attribute '{field}'"
                )
