"""
Document template model for the vetmarket package.

Templates describe how certificates and other documents are laid out
(``layout_configuration``) and branded (``branding_options``); the rendering
service turns a template plus a data payload into PDF or HTML.
"""

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..database.types import JSONType
from .base import BaseModel


class DocumentTemplate(BaseModel):
    """A reusable document layout with branding."""

    __tablename__ = "document_templates"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize DocumentTemplate with default values."""
        kwargs.setdefault("layout_configuration", {})
        kwargs.setdefault("branding_options", {})
        kwargs.setdefault("required_fields", [])
        kwargs.setdefault("is_default", False)
        super().__init__(**kwargs)

    name: Mapped[str] = mapped_column(
        String(200), nullable=False, unique=True, index=True
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    layout_configuration: Mapped[Dict[str, Any]] = mapped_column(
        JSONType,
        nullable=False,
        default=dict,
        comment="Title, orientation and ordered field list",
    )

    branding_options: Mapped[Dict[str, Any]] = mapped_column(
        JSONType,
        nullable=False,
        default=dict,
        comment="logoUrl, primaryColor and secondaryColor",
    )

    required_fields: Mapped[List[str]] = mapped_column(
        JSONType, nullable=False, default=list
    )

    is_default: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, index=True
    )

    created_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
