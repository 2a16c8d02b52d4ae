from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from quotify_api.auth.deps import CurrentUser, get_interactive_user
from quotify_api.core.db import get_db
from quotify_api.domain.services import load_template_data
from quotify_api.repositories.template import TemplateRepository
from quotify_api.schemas.template import TemplateData, TemplateIn, TemplateOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("/me", response_model=TemplateOut)
async def get_my_template(
    current: CurrentUser = Depends(get_interactive_user),
    session: AsyncSession = Depends(get_db),
) -> TemplateOut:
    template = await TemplateRepository(session).get_for_organization(current.organization_id)
    if template is None:
        return TemplateOut(
            organization_id=current.organization_id,
            template_data=TemplateData(),
            exists=False,
        )
    return TemplateOut(
        id=template.id,
        organization_id=template.organization_id,
        template_name=template.template_name,
        template_data=load_template_data(template.template_data),
        updated_at=template.updated_at,
    )


@router.put("/me", response_model=TemplateOut)
async def save_my_template(
    body: TemplateIn,
    current: CurrentUser = Depends(get_interactive_user),
    session: AsyncSession = Depends(get_db),
) -> TemplateOut:
    template = await TemplateRepository(session).upsert(
        current.organization_id,
        body.template_data.model_dump(),
        template_name=body.template_name,
    )
    await session.commit()

    logger.info("Template %s saved for organization %s", template.id, current.organization_id)
    return TemplateOut(
        id=template.id,
        organization_id=template.organization_id,
        template_name=template.template_name,
        template_data=load_template_data(template.template_data),
        updated_at=template.updated_at,
    )
