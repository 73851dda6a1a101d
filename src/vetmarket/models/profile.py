"""
Visiting vet profile model for the vetmarket package.

This module contains the VisitingVetProfile SQLAlchemy model: the public,
business-facing record of a mobile veterinary provider, covering credentials,
service area, scheduling preferences, rating aggregates and the manual DORA
licence verification state.
"""

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any, List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database.types import JSONType, value_enum
from .base import BaseModel

if TYPE_CHECKING:
    from .service import Service


class AnimalType(enum.Enum):
    """Enumeration of animal categories a provider can treat."""

    SMALL_ANIMAL = "Small Animal"
    LARGE_ANIMAL = "Large Animal"
    EXOTIC = "Exotic"
    AVIAN = "Avian"
    EQUINE = "Equine"
    FARM_ANIMAL = "Farm Animal"
    OTHER = "Other"


class DoraStatus(enum.Enum):
    """Outcome of the manual DORA licence check."""

    NOT_VERIFIED = "Not Verified"
    VERIFIED_VALID = "Verified - Valid"
    VERIFIED_EXPIRED = "Verified - Expired"
    VERIFIED_OTHER_ISSUE = "Verified - Other Issue"
    VERIFICATION_PENDING = "Verification Pending"


MANUAL_DORA_SOURCE = "Manual DORA Check"


class VisitingVetProfile(BaseModel):
    """
    Business profile of a mobile veterinary service provider.

    Exactly one profile exists per provider account (unique ``user_id``).
    Services are stored in their own table and reached through ``services``.
    """

    __tablename__ = "visiting_vet_profiles"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize VisitingVetProfile with default values."""
        kwargs.setdefault("credentials", [])
        kwargs.setdefault("years_experience", 0)
        kwargs.setdefault("service_area_zip_codes", [])
        kwargs.setdefault("clinic_affiliations", [])
        kwargs.setdefault("use_external_scheduling", False)
        kwargs.setdefault("animal_types", [AnimalType.SMALL_ANIMAL.value])
        kwargs.setdefault("specialty_services", [])
        kwargs.setdefault("average_rating", 0.0)
        kwargs.setdefault("number_of_reviews", 0)
        kwargs.setdefault("dora_status", DoraStatus.NOT_VERIFIED)

        super().__init__(**kwargs)

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
        comment="Provider account owning this profile",
    )

    # Professional details
    bio: Mapped[str] = mapped_column(
        String(1000), nullable=False, comment="Professional biography"
    )

    credentials: Mapped[List[str]] = mapped_column(
        JSONType, nullable=False, default=list, comment="Degrees and certifications"
    )

    years_experience: Mapped[int] = mapped_column(
        nullable=False, default=0, comment="Years of veterinary experience"
    )

    photo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Service area
    service_area_description: Mapped[Optional[str]] = mapped_column(
        String(500), nullable=True, comment="Free-text description of the area served"
    )

    service_area_radius_km: Mapped[Optional[float]] = mapped_column(
        Float, nullable=True, comment="Travel radius in kilometres"
    )

    service_area_zip_codes: Mapped[List[str]] = mapped_column(
        JSONType, nullable=False, default=list, comment="ZIP codes served"
    )

    # Licensing and insurance
    license_info: Mapped[str] = mapped_column(
        Text, nullable=False, comment="Licence number and issuing board"
    )

    insurance_info: Mapped[str] = mapped_column(
        Text, nullable=False, comment="Liability insurance details"
    )

    clinic_affiliations: Mapped[List[str]] = mapped_column(
        JSONType, nullable=False, default=list
    )

    # External scheduling
    use_external_scheduling: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    external_scheduling_url: Mapped[Optional[str]] = mapped_column(
        String(500), nullable=True, comment="Booking link when scheduling is external"
    )

    # Contact and business details
    contact_phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    contact_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    business_name: Mapped[Optional[str]] = mapped_column(
        String(200), nullable=True, index=True
    )

    business_address: Mapped[Optional[str]] = mapped_column(
        String(500), nullable=True
    )

    business_description: Mapped[Optional[str]] = mapped_column(
        String(1000), nullable=True
    )

    # Animal types and specialties
    animal_types: Mapped[List[str]] = mapped_column(
        JSONType,
        nullable=False,
        default=lambda: [AnimalType.SMALL_ANIMAL.value],
        comment="Animal categories treated",
    )

    specialty_services: Mapped[List[str]] = mapped_column(
        JSONType, nullable=False, default=list
    )

    # Rating aggregates, recalculated from approved reviews
    average_rating: Mapped[float] = mapped_column(
        Float, nullable=False, default=0.0
    )

    number_of_reviews: Mapped[int] = mapped_column(nullable=False, default=0)

    # Manual DORA verification
    dora_status: Mapped[DoraStatus] = mapped_column(
        value_enum(DoraStatus, "dorastatus"),
        nullable=False,
        default=DoraStatus.NOT_VERIFIED,
        index=True,
    )

    dora_last_checked: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    dora_verified_by_admin_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        comment="Admin who recorded the last DORA check",
    )

    dora_source: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    services: Mapped[List["Service"]] = relationship(
        "Service",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Service.created_at",
        lazy="raise",
    )

    __table_args__ = (
        CheckConstraint("years_experience >= 0", name="check_years_experience"),
        CheckConstraint(
            "service_area_radius_km IS NULL OR service_area_radius_km >= 0",
            name="check_service_area_radius",
        ),
        CheckConstraint(
            "average_rating >= 0 AND average_rating <= 5",
            name="check_average_rating_range",
        ),
        CheckConstraint("number_of_reviews >= 0", name="check_number_of_reviews"),
        Index("idx_profile_created", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<VisitingVetProfile(id={self.id}, user_id={self.user_id})>"

    @property
    def is_dora_verified(self) -> bool:
        """Whether the latest DORA check confirmed a valid licence."""
        return self.dora_status == DoraStatus.VERIFIED_VALID

    def serves_zip_code(self, zip_code: str) -> bool:
        """Check whether a ZIP code is in the listed service area."""
        return zip_code in (self.service_area_zip_codes or [])

    def treats_any(self, animal_types: List[str]) -> bool:
        """Check whether the provider treats at least one of the given animal types."""
        return bool(set(animal_types) & set(self.animal_types or []))

    def offers_any_specialty(self, specialties: List[str]) -> bool:
        """Check whether the provider lists at least one of the given specialties."""
        return bool(set(specialties) & set(self.specialty_services or []))

    def record_dora_check(
        self, status: DoraStatus, checked_at: datetime, admin_id: uuid.UUID
    ) -> None:
        """
        Store the result of a manual DORA licence check.

        Args:
            status: Verification outcome
            checked_at: When the check was performed
            admin_id: Administrator who performed it
        """
        self.dora_status = status
        self.dora_last_checked = checked_at
        self.dora_verified_by_admin_id = admin_id
        self.dora_source = MANUAL_DORA_SOURCE

    @property
    def dora_verification(self) -> dict:
        """DORA verification block as exposed by the API."""
        return {
            "status": self.dora_status.value if self.dora_status else None,
            "lastChecked": (
                self.dora_last_checked.isoformat() if self.dora_last_checked else None
            ),
            "verifiedByAdminId": (
                str(self.dora_verified_by_admin_id)
                if self.dora_verified_by_admin_id
                else None
            ),
            "source": self.dora_source,
        }
