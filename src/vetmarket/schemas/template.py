"""
Document template Pydantic schemas.
"""

import re
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from .common import CamelModel, ResponseModel

HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")


class BrandingOptions(CamelModel):
    """Logo and colours applied to rendered documents."""

    logo_url: Optional[str] = Field(None, max_length=500)
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None

    @field_validator("primary_color", "secondary_color")
    @classmethod
    def validate_color(cls, v: Optional[str]) -> Optional[str]:
        """Colours must be hex codes such as ``#1a73e8``."""
        if v is not None and not HEX_COLOR_PATTERN.match(v):
            raise ValueError("Colour must be a hex code like #1a73e8")
        return v


class TemplateCreate(CamelModel):
    """Schema for creating a document template."""

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    layout_configuration: Dict[str, Any]
    branding_options: BrandingOptions = Field(default_factory=BrandingOptions)
    required_fields: List[str] = []
    is_default: bool = False


class TemplateResponse(ResponseModel):
    """Schema for template data returned by the API."""

    id: UUID
    name: str
    description: Optional[str] = None
    layout_configuration: Dict[str, Any]
    branding_options: Dict[str, Any]
    required_fields: List[str] = []
    is_default: bool
    created_by_id: Optional[UUID] = None
    created_at: datetime


class RenderRequest(CamelModel):
    """Schema for rendering a document from a template."""

    template_id: Optional[UUID] = None
    format: str = "pdf"
    data: Dict[str, Any] = {}
