"""
PromptMaster Backend - Template Route Handlers
==============================================

What:  Read-only access to the public prompt templates.
Who:   The mobile client's template picker.

Endpoints:
    GET /api/templates                        most-used first
    GET /api/templates/category/{category}    one category
    GET /api/templates/{id}                   one template (counts as a use)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from promptmaster.database import get_db_session
from promptmaster.schemas.common import ErrorResponse
from promptmaster.schemas.template import TemplateListResponse, TemplateResponse
from promptmaster.services.template_service import template_service

router = APIRouter(prefix="/api", tags=["Templates"])


@router.get(
    "/templates",
    response_model=TemplateListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List public templates",
)
async def list_templates(
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db_session),
) -> TemplateListResponse:
    return await template_service.list_templates(db=db, limit=limit, offset=offset)


@router.get(
    "/templates/category/{category}",
    response_model=TemplateListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List public templates in a category",
)
async def list_templates_by_category(
    category: str = Path(..., min_length=1, max_length=50),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db_session),
) -> TemplateListResponse:
    return await template_service.list_by_category(
        db=db, category=category, limit=limit, offset=offset
    )


@router.get(
    "/templates/{template_id}",
    response_model=TemplateResponse,
    responses={
        404: {"description": "Template not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a template",
    description="Returns one public template and increments its usage count.",
)
async def get_template(
    template_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> TemplateResponse:
    return await template_service.get_template(db=db, template_id=template_id)
