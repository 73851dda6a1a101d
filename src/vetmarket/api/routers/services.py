"""Service router - offerings listed on a visiting vet profile"""

import logging
import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.user import User
from ...schemas.service import ServiceCreate, ServiceResponse, ServiceUpdate
from ...services.catalog import CatalogService
from ...services.profiles import PROFILE_NOT_FOUND
from ..deps import get_db_session, parse_public_id, require_provider
from ..responses import envelope, serialize, serialize_many

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profiles/visiting-vet", tags=["Services"])


def get_catalog_service(session: AsyncSession = Depends(get_db_session)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(session)


@router.post("/services")
async def create_service(
    payload: ServiceCreate,
    user: User = Depends(require_provider),
    catalog: CatalogService = Depends(get_catalog_service),
):
    service = await catalog.create_service(user, payload)
    return envelope(serialize(ServiceResponse, service), status_code=201)


@router.put("/services/{service_id}")
async def update_service(
    service_id: uuid.UUID,
    payload: ServiceUpdate,
    user: User = Depends(require_provider),
    catalog: CatalogService = Depends(get_catalog_service),
):
    service = await catalog.update_service(user, service_id, payload)
    return envelope(serialize(ServiceResponse, service))


@router.delete("/services/{service_id}")
async def delete_service(
    service_id: uuid.UUID,
    user: User = Depends(require_provider),
    catalog: CatalogService = Depends(get_catalog_service),
):
    await catalog.delete_service(user, service_id)
    return envelope(message="Service deleted successfully")


@router.get("/{profile_id}/services")
async def list_profile_services(
    profile_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Public list of a profile's services"""
    profile_uuid = parse_public_id(profile_id, PROFILE_NOT_FOUND, "VisitingVetProfile")
    services = await catalog.list_for_profile(profile_uuid)
    return envelope(serialize_many(ServiceResponse, services), count=len(services))
