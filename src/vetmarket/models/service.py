"""
Service model for the vetmarket package.

This module contains the Service SQLAlchemy model: a bookable offering owned
by a visiting vet profile, priced either with a single flat ``price`` or with
separate business (B2B) and consumer (B2C) prices.
"""

import enum
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Float,
    ForeignKey,
    Index,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from ..database.types import JSONType, value_enum
from .base import BaseModel
from .profile import AnimalType


class PriceType(enum.Enum):
    """How the listed price is charged."""

    FLAT = "Flat"
    HOURLY = "Hourly"
    RANGE = "Range"
    CONTACT = "Contact"


class OfferedLocation(enum.Enum):
    """Where the service is delivered."""

    IN_HOME = "InHome"
    IN_CLINIC = "InClinic"
    BOTH = "Both"
    FARM = "Farm"
    RANCH = "Ranch"
    STABLE = "Stable"


class CustomFieldType(enum.Enum):
    """Input types for provider-defined booking questions."""

    TEXT = "Text"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    SELECT = "Select"


class Service(BaseModel):
    """
    A provider's service listing.

    Pricing holds exactly one view at a time: ``price`` when
    ``has_different_pricing`` is false, ``b2b_price``/``b2c_price`` when it
    is true. ``apply_pricing_mode`` enforces this on the instance and a table
    check constraint rejects rows carrying both.
    """

    __tablename__ = "services"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize Service with default values."""
        kwargs.setdefault("has_public_pricing", True)
        kwargs.setdefault("has_different_pricing", False)
        kwargs.setdefault("price_type", PriceType.FLAT)
        kwargs.setdefault("offered_location", OfferedLocation.IN_HOME)
        kwargs.setdefault("animal_type", AnimalType.SMALL_ANIMAL)
        kwargs.setdefault("is_specialty_service", False)
        kwargs.setdefault("custom_fields", [])

        super().__init__(**kwargs)

    profile_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("visiting_vet_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning visiting vet profile",
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    description: Mapped[str] = mapped_column(String(1000), nullable=False)

    estimated_duration_minutes: Mapped[int] = mapped_column(
        nullable=False, comment="Expected length of the visit"
    )

    # Pricing
    price: Mapped[Optional[float]] = mapped_column(
        Float, nullable=True, comment="Flat price when a single price applies"
    )

    has_public_pricing: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )

    b2b_price: Mapped[Optional[float]] = mapped_column(
        Float, nullable=True, comment="Price charged to businesses"
    )

    b2c_price: Mapped[Optional[float]] = mapped_column(
        Float, nullable=True, comment="Price charged to pet owners"
    )

    has_different_pricing: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    price_type: Mapped[PriceType] = mapped_column(
        value_enum(PriceType, "pricetype"),
        nullable=False,
        default=PriceType.FLAT,
    )

    offered_location: Mapped[OfferedLocation] = mapped_column(
        value_enum(OfferedLocation, "offeredlocation"),
        nullable=False,
        default=OfferedLocation.IN_HOME,
    )

    animal_type: Mapped[AnimalType] = mapped_column(
        value_enum(AnimalType, "animaltype"),
        nullable=False,
        default=AnimalType.SMALL_ANIMAL,
    )

    is_specialty_service: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    specialty_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    custom_fields: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        comment="Provider-defined booking questions",
    )

    __table_args__ = (
        CheckConstraint(
            "estimated_duration_minutes >= 1", name="check_duration_positive"
        ),
        CheckConstraint("price IS NULL OR price >= 0", name="check_price_non_negative"),
        CheckConstraint(
            "b2b_price IS NULL OR b2b_price >= 0", name="check_b2b_price_non_negative"
        ),
        CheckConstraint(
            "b2c_price IS NULL OR b2c_price >= 0", name="check_b2c_price_non_negative"
        ),
        CheckConstraint(
            "price IS NULL OR (b2b_price IS NULL AND b2c_price IS NULL)",
            name="check_single_pricing_view",
        ),
        Index("idx_service_profile_created", "profile_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Service(id={self.id}, name='{self.name}', profile_id={self.profile_id})>"

    def apply_pricing_mode(self) -> None:
        """Drop the pricing view that the current mode does not use."""
        if self.has_different_pricing:
            self.price = None
        else:
            self.b2b_price = None
            self.b2c_price = None

    def belongs_to(self, profile_id: uuid.UUID) -> bool:
        """Check whether the service is owned by the given profile."""
        return self.profile_id == profile_id
