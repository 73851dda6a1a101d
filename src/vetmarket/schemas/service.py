"""
Service Pydantic schemas for API validation and serialization.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from ..models.profile import AnimalType
from ..models.service import CustomFieldType, OfferedLocation, PriceType
from .common import CamelModel, ResponseModel


class CustomFieldSchema(CamelModel):
    """Schema for a provider-defined booking question."""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    required: bool = False
    type: CustomFieldType = CustomFieldType.TEXT
    options: List[str] = []

    @model_validator(mode="after")
    def validate_select_options(self) -> "CustomFieldSchema":
        """Select questions need at least one option."""
        if self.type == CustomFieldType.SELECT and not self.options:
            raise ValueError("Select fields require at least one option")
        return self


class ServiceCreate(CamelModel):
    """Schema for creating a service."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    estimated_duration_minutes: int = Field(..., ge=1)
    price: Optional[float] = Field(None, ge=0)
    has_public_pricing: bool = True
    b2b_price: Optional[float] = Field(None, ge=0)
    b2c_price: Optional[float] = Field(None, ge=0)
    has_different_pricing: bool = False
    price_type: PriceType = PriceType.FLAT
    offered_location: OfferedLocation = OfferedLocation.IN_HOME
    animal_type: AnimalType = AnimalType.SMALL_ANIMAL
    is_specialty_service: bool = False
    specialty_type: Optional[str] = Field(None, max_length=100)
    custom_fields: List[CustomFieldSchema] = []

    @field_validator("specialty_type")
    @classmethod
    def blank_specialty_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class ServiceUpdate(CamelModel):
    """Schema for updating a service; only supplied fields change."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=1000)
    estimated_duration_minutes: Optional[int] = Field(None, ge=1)
    price: Optional[float] = Field(None, ge=0)
    has_public_pricing: Optional[bool] = None
    b2b_price: Optional[float] = Field(None, ge=0)
    b2c_price: Optional[float] = Field(None, ge=0)
    has_different_pricing: Optional[bool] = None
    price_type: Optional[PriceType] = None
    offered_location: Optional[OfferedLocation] = None
    animal_type: Optional[AnimalType] = None
    is_specialty_service: Optional[bool] = None
    specialty_type: Optional[str] = Field(None, max_length=100)
    custom_fields: Optional[List[CustomFieldSchema]] = None


class ServiceResponse(ResponseModel):
    """Schema for service data returned by the API."""

    id: UUID
    profile_id: UUID
    name: str
    description: str
    estimated_duration_minutes: int
    price: Optional[float] = None
    has_public_pricing: bool
    b2b_price: Optional[float] = None
    b2c_price: Optional[float] = None
    has_different_pricing: bool
    price_type: PriceType
    offered_location: OfferedLocation
    animal_type: AnimalType
    is_specialty_service: bool
    specialty_type: Optional[str] = None
    custom_fields: List[Dict[str, Any]] = []
    created_at: datetime
    updated_at: datetime
