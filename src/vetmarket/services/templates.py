"""
Document template administration.
"""

import logging
from typing import List

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ValidationException
from ..models.template import DocumentTemplate
from ..models.user import User
from ..schemas.template import TemplateCreate

logger = logging.getLogger(__name__)


class TemplateService:
    """Business logic for document templates."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_template(self, admin: User, payload: TemplateCreate) -> DocumentTemplate:
        """
        Create a template; a new default template replaces the previous one.

        Raises:
            ValidationException: If the name is already taken
        """
        existing = await self.session.scalar(
            select(DocumentTemplate.id).where(DocumentTemplate.name == payload.name)
        )
        if existing is not None:
            raise ValidationException(
                "A template with this name already exists", field="name", value=payload.name
            )

        if payload.is_default:
            await self.session.execute(
                update(DocumentTemplate)
                .where(DocumentTemplate.is_default.is_(True))
                .values(is_default=False)
            )

        template = DocumentTemplate(
            name=payload.name,
            description=payload.description,
            layout_configuration=payload.layout_configuration,
            branding_options=payload.branding_options.model_dump(by_alias=True, exclude_none=True),
            required_fields=payload.required_fields,
            is_default=payload.is_default,
            created_by_id=admin.id,
        )
        self.session.add(template)
        await self.session.commit()

        logger.info(f"Template {template.name} created by {admin.id}")
        return template

    async def list_templates(self) -> List[DocumentTemplate]:
        result = await self.session.execute(
            select(DocumentTemplate).order_by(DocumentTemplate.created_at)
        )
        return list(result.scalars().all())
