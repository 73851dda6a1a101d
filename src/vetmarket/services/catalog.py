"""
Service listing operations for visiting vet profiles.

A service carries either a flat ``price`` or a B2B/B2C pair, never both;
every write goes through ``Service.apply_pricing_mode`` so only the active
pricing view is stored.
"""

import logging
import uuid
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import AuthorizationException, NotFoundException
from ..models.service import Service
from ..models.user import User
from ..schemas.service import ServiceCreate, ServiceUpdate
from .profiles import PROFILE_NOT_FOUND, ProfileService

logger = logging.getLogger(__name__)

SERVICE_NOT_FOUND = "Service not found"

# Fields a provider may change through the update endpoint
UPDATABLE_SERVICE_FIELDS = frozenset(
    {
        "name",
        "description",
        "estimated_duration_minutes",
        "price",
        "has_public_pricing",
        "b2b_price",
        "b2c_price",
        "has_different_pricing",
        "price_type",
        "offered_location",
        "animal_type",
        "is_specialty_service",
        "specialty_type",
        "custom_fields",
    }
)

NON_NULL_SERVICE_FIELDS = UPDATABLE_SERVICE_FIELDS - {
    "price",
    "b2b_price",
    "b2c_price",
    "specialty_type",
}


def _dump_custom_fields(fields: Any) -> List[Dict[str, Any]]:
    return [field.model_dump(mode="json") for field in fields or []]


class CatalogService:
    """Business logic for the services a provider offers."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.profiles = ProfileService(session)

    async def _get_owned_service(
        self, user: User, service_id: uuid.UUID, action: str
    ) -> Service:
        profile = await self.profiles.require_own_profile(user)

        service = await self.session.get(Service, service_id)
        if service is None:
            raise NotFoundException(SERVICE_NOT_FOUND, resource="Service", resource_id=service_id)

        if not service.belongs_to(profile.id):
            logger.warning(
                f"User {user.id} tried to {action} service {service_id} of profile {service.profile_id}"
            )
            raise AuthorizationException(f"Not authorized to {action} this service")
        return service

    async def create_service(self, user: User, payload: ServiceCreate) -> Service:
        """
        Add a service to the caller's profile.

        Raises:
            NotFoundException: If the caller has no profile
        """
        profile = await self.profiles.require_own_profile(user)

        data = payload.model_dump(exclude={"custom_fields"})
        service = Service(
            profile_id=profile.id,
            custom_fields=_dump_custom_fields(payload.custom_fields),
            **data,
        )
        service.apply_pricing_mode()

        self.session.add(service)
        await self.session.commit()

        logger.info(f"Created service {service.id} for profile {profile.id}")
        return service

    async def update_service(
        self, user: User, service_id: uuid.UUID, payload: ServiceUpdate
    ) -> Service:
        """
        Update one of the caller's services.

        Switching ``has_different_pricing`` on drops the flat price; switching
        it off drops the B2B/B2C prices; sending a ``price`` for a dual-priced
        service without touching the toggle switches it back to flat pricing.

        Raises:
            NotFoundException: If the profile or service does not exist
            AuthorizationException: If the service belongs to another profile
        """
        service = await self._get_owned_service(user, service_id, "update")

        updates = {
            name: value
            for name, value in payload.model_dump(exclude_unset=True).items()
            if name in UPDATABLE_SERVICE_FIELDS
        }
        if "custom_fields" in updates:
            updates["custom_fields"] = _dump_custom_fields(payload.custom_fields)
        if (
            "has_different_pricing" not in updates
            and updates.get("price") is not None
            and service.has_different_pricing
        ):
            updates["has_different_pricing"] = False

        for name in NON_NULL_SERVICE_FIELDS:
            if name in updates and updates[name] is None:
                updates.pop(name)

        service.update_fields(**updates)
        service.apply_pricing_mode()

        await self.session.commit()
        logger.info(f"Updated service {service.id}: {sorted(updates)}")
        return service

    async def delete_service(self, user: User, service_id: uuid.UUID) -> None:
        """
        Delete one of the caller's services.

        Raises:
            NotFoundException: If the profile or service does not exist
            AuthorizationException: If the service belongs to another profile
        """
        service = await self._get_owned_service(user, service_id, "delete")
        await self.session.delete(service)
        await self.session.commit()
        logger.info(f"Deleted service {service_id}")

    async def list_for_profile(self, profile_id: uuid.UUID) -> List[Service]:
        """
        Public list of a profile's services, oldest first.

        Raises:
            NotFoundException: If the profile does not exist
        """
        if await self.profiles.get_by_id(profile_id) is None:
            raise NotFoundException(
                PROFILE_NOT_FOUND, resource="VisitingVetProfile", resource_id=profile_id
            )
        result = await self.session.execute(
            select(Service)
            .where(Service.profile_id == profile_id)
            .order_by(Service.created_at)
        )
        return list(result.scalars().all())
