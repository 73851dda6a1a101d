"""
Provider verification certificates.

A certificate is only issued once a provider's licence has been confirmed
through a DORA check with the ``Verified - Valid`` outcome.
"""

import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ValidationException
from ..models.profile import VisitingVetProfile
from ..models.user import User
from .rendering import RenderedDocument, find_template, render_template

logger = logging.getLogger(__name__)


def certificate_data(profile: VisitingVetProfile, user: Optional[User] = None) -> Dict[str, Any]:
    """Payload printed on a provider certificate."""
    return {
        "provider": {
            "name": (user.name if user else None) or profile.business_name,
            "email": user.email if user else profile.contact_email,
        },
        "businessName": profile.business_name,
        "licenseInfo": profile.license_info,
        "insuranceInfo": profile.insurance_info,
        "yearsExperience": profile.years_experience,
        "animalTypes": list(profile.animal_types or []),
        "serviceArea": profile.service_area_description,
        "doraStatus": profile.dora_status.value,
        "doraLastChecked": (
            profile.dora_last_checked.date().isoformat() if profile.dora_last_checked else None
        ),
        "profileId": str(profile.id),
    }


async def generate_provider_certificate(
    session: AsyncSession,
    profile: VisitingVetProfile,
    template_id: Optional[uuid.UUID] = None,
    format: str = "pdf",
    user: Optional[User] = None,
) -> RenderedDocument:
    """
    Render a verification certificate for a provider.

    Args:
        session: Database session used to look up the template
        profile: Provider profile the certificate is for
        template_id: Template to use; defaults to the default template
        format: ``pdf`` or ``html``
        user: Owning account, for the name printed on the certificate

    Returns:
        PDF bytes or an HTML string

    Raises:
        ValidationException: If the provider's DORA status is not ``Verified - Valid``
        NotFoundException: If ``template_id`` does not exist
        RenderingException: If no template exists or rendering fails
    """
    if not profile.is_dora_verified:
        raise ValidationException(
            f"Cannot generate certificate for provider with status: "
            f"{profile.dora_status.value}. Provider must be verified."
        )

    template = await find_template(session, template_id)
    logger.info(f"Generating certificate for profile {profile.id} using template {template.name}")
    return render_template(certificate_data(profile, user), template, format)
