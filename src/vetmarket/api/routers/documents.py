"""Documents router - rendering arbitrary data through a template"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.user import User
from ...schemas.template import RenderRequest
from ...services.rendering import RenderedDocument, find_template, render_template
from ..deps import get_db_session, protect

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/documents", tags=["Documents"])


def document_response(document: RenderedDocument, filename: str = "document") -> Response:
    """Wrap rendered output in a response with the matching media type."""
    if isinstance(document, bytes):
        return Response(
            content=document,
            media_type="application/pdf",
            headers={"Content-Disposition": f'inline; filename="{filename}.pdf"'},
        )
    return Response(content=document, media_type="text/html; charset=utf-8")


@router.post("/render")
async def render_document(
    payload: RenderRequest,
    user: User = Depends(protect),
    session: AsyncSession = Depends(get_db_session),
):
    """Render ``data`` with the requested template, or the default one"""
    template = await find_template(session, payload.template_id)
    logger.info(f"User {user.id} rendering template {template.name} as {payload.format}")
    document = render_template(payload.data, template, payload.format)
    return document_response(document, filename=template.name)
