"""
Visiting vet profile Pydantic schemas.

``ProfileWrite`` is used for the create-or-update endpoint, so every field is
optional here; required fields for a brand-new profile are enforced by the
profile service once it knows whether a profile already exists.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator, model_validator

from ..models.profile import AnimalType
from .common import CamelModel, ResponseModel
from .service import ServiceResponse

REQUIRED_PROFILE_FIELDS = ("bio", "license_info", "insurance_info")


class ProfileWrite(CamelModel):
    """Schema for creating or updating the caller's profile."""

    bio: Optional[str] = Field(None, min_length=1, max_length=1000)
    credentials: Optional[List[str]] = None
    years_experience: Optional[int] = Field(None, ge=0)
    photo_url: Optional[str] = Field(None, max_length=500)
    service_area_description: Optional[str] = Field(None, max_length=500)
    service_area_radius_km: Optional[float] = Field(None, ge=0)
    service_area_zip_codes: Optional[List[str]] = None
    license_info: Optional[str] = Field(None, min_length=1)
    insurance_info: Optional[str] = Field(None, min_length=1)
    clinic_affiliations: Optional[List[str]] = None
    use_external_scheduling: Optional[bool] = None
    external_scheduling_url: Optional[str] = Field(None, max_length=500)
    contact_phone: Optional[str] = Field(None, max_length=30)
    contact_email: Optional[EmailStr] = None
    business_name: Optional[str] = Field(None, max_length=200)
    business_address: Optional[str] = Field(None, max_length=500)
    business_description: Optional[str] = Field(None, max_length=1000)
    animal_types: Optional[List[AnimalType]] = None
    specialty_services: Optional[List[str]] = None

    @field_validator(
        "credentials",
        "service_area_zip_codes",
        "clinic_affiliations",
        "specialty_services",
    )
    @classmethod
    def validate_string_lists(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        """Strip list items and drop empty ones."""
        if v is None:
            return v
        return [item.strip() for item in v if item and item.strip()]

    @field_validator("animal_types")
    @classmethod
    def validate_animal_types(
        cls, v: Optional[List[AnimalType]]
    ) -> Optional[List[AnimalType]]:
        """At least one animal type when the list is supplied; no duplicates."""
        if v is None:
            return v
        if not v:
            raise ValueError("At least one animal type must be specified")
        return list(dict.fromkeys(v))

    @field_validator("contact_email")
    @classmethod
    def normalize_contact_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v

    @model_validator(mode="after")
    def validate_external_scheduling(self) -> "ProfileWrite":
        """
        Reject turning external scheduling on while blanking the booking link.

        A link stored earlier is checked by the profile service, which sees
        the merged values.
        """
        url_sent = "external_scheduling_url" in self.model_fields_set
        if self.use_external_scheduling and url_sent and not self.external_scheduling_url:
            raise ValueError(
                "External scheduling URL is required when external scheduling is enabled"
            )
        return self

    def model_fields_for_update(self) -> Dict[str, Any]:
        """Explicitly supplied fields, with enums converted to stored values."""
        data = self.model_dump(exclude_unset=True)
        if data.get("animal_types") is not None:
            data["animal_types"] = [t.value for t in self.animal_types or []]
        return data


class ProfileResponse(ResponseModel):
    """Schema for profile data returned by the API."""

    id: UUID
    user_id: UUID
    bio: str
    credentials: List[str] = []
    years_experience: int
    photo_url: Optional[str] = None
    service_area_description: Optional[str] = None
    service_area_radius_km: Optional[float] = None
    service_area_zip_codes: List[str] = []
    license_info: str
    insurance_info: str
    clinic_affiliations: List[str] = []
    use_external_scheduling: bool
    external_scheduling_url: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    business_name: Optional[str] = None
    business_address: Optional[str] = None
    business_description: Optional[str] = None
    animal_types: List[str] = []
    specialty_services: List[str] = []
    average_rating: float
    number_of_reviews: int
    dora_verification: Dict[str, Any]
    created_at: datetime
    updated_at: datetime


class PublicUserInfo(ResponseModel):
    """Public fields of the provider's account."""

    id: UUID
    name: Optional[str] = None
    email: str
    profile_image: Optional[str] = None
    is_verified: bool


class ProfileDetailResponse(ProfileResponse):
    """Profile with its services and, for public lookups, the owner's info."""

    services: List[ServiceResponse] = []
    user: Optional[PublicUserInfo] = None
