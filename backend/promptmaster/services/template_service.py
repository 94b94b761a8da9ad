"""
PromptMaster Backend - Template Service
=======================================

What:  Read access to the public template catalogue.
How:   Plain SELECTs over `templates`, most-used first. Opening a single
       template bumps its usage_count so the listing reflects popularity.
Who:   Called by the /api/templates route handlers.
"""

import logging
import uuid

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptmaster.exceptions import DatabaseError, NotFoundError
from promptmaster.models.template import Template
from promptmaster.schemas.template import TemplateListResponse, TemplateResponse

logger = logging.getLogger(__name__)


class TemplateService:

    async def list_templates(
        self,
        db: AsyncSession,
        limit: int = 50,
        offset: int = 0,
    ) -> TemplateListResponse:
        return await self._list(db, category=None, limit=limit, offset=offset)

    async def list_by_category(
        self,
        db: AsyncSession,
        category: str,
        limit: int = 50,
        offset: int = 0,
    ) -> TemplateListResponse:
        return await self._list(db, category=category, limit=limit, offset=offset)

    async def get_template(self, db: AsyncSession, template_id: uuid.UUID) -> TemplateResponse:
        """
        Fetch one public template and record the use.

        Raises:
            NotFoundError: unknown ID, or the template is not public
            DatabaseError: query or update failed
        """
        try:
            result = await db.execute(
                select(Template).where(Template.id == template_id, Template.is_public.is_(True))
            )
            template = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching template %s: %s", template_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the template. Please try again.",
                context={"template_id": str(template_id)},
            )

        if template is None:
            raise NotFoundError(resource="template", resource_id=str(template_id))

        template.usage_count = (template.usage_count or 0) + 1
        try:
            await db.flush()
        except Exception as e:
            logger.error("Failed to record template use %s: %s", template_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the template. Please try again.",
                context={"template_id": str(template_id)},
            )

        return TemplateResponse.model_validate(template)

    async def _list(
        self,
        db: AsyncSession,
        category: str | None,
        limit: int,
        offset: int,
    ) -> TemplateListResponse:
        try:
            query = select(Template).where(Template.is_public.is_(True))
            count_query = select(func.count(Template.id)).where(Template.is_public.is_(True))
            if category:
                query = query.where(Template.category == category)
                count_query = count_query.where(Template.category == category)

            query = query.order_by(desc(Template.usage_count), Template.name).limit(limit).offset(offset)

            result = await db.execute(query)
            templates = list(result.scalars().all())

            count_result = await db.execute(count_query)
            total = count_result.scalar() or 0
        except Exception as e:
            logger.error("Database error listing templates: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve templates. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return TemplateListResponse(
            templates=[TemplateResponse.model_validate(t) for t in templates],
            category=category,
            total=total,
            limit=limit,
            offset=offset,
        )


# ── Singleton Instance ────────────────────────────────────────────────────
template_service = TemplateService()
