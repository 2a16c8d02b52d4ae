from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from quotify_api.auth.deps import CurrentUser, get_interactive_user
from quotify_api.core.config import settings
from quotify_api.core.db import get_db
from quotify_api.core.exceptions import NotFoundError
from quotify_api.domain.services import encode_logo, merge_company_details, organization_view
from quotify_api.repositories.organization import OrganizationRepository
from quotify_api.schemas.organization import CompanyDetailsIn, LogoOut, OrganizationOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/organizations", tags=["organizations"])


async def _load(repo: OrganizationRepository, organization_id: int):
    org = await repo.get(organization_id)
    if org is None:
        raise NotFoundError("Organization not found")
    return org


@router.get("/me", response_model=OrganizationOut)
async def get_my_organization(
    current: CurrentUser = Depends(get_interactive_user),
    session: AsyncSession = Depends(get_db),
) -> OrganizationOut:
    org = await _load(OrganizationRepository(session), current.organization_id)
    return OrganizationOut(**organization_view(org, fallback_email=current.user.email))


@router.put("/me", response_model=OrganizationOut)
async def save_company_details(
    body: CompanyDetailsIn,
    current: CurrentUser = Depends(get_interactive_user),
    session: AsyncSession = Depends(get_db),
) -> OrganizationOut:
    repo = OrganizationRepository(session)
    org = await _load(repo, current.organization_id)

    org_data = merge_company_details(org.org_data or {}, body)
    await repo.update(org, name=body.companyName, org_data=org_data)
    await session.commit()

    logger.info("Company details saved for organization %s", org.id)
    return OrganizationOut(**organization_view(org))


@router.post("/me/logo", response_model=LogoOut)
async def upload_logo(
    file: UploadFile = File(...),
    current: CurrentUser = Depends(get_interactive_user),
    session: AsyncSession = Depends(get_db),
) -> LogoOut:
    content = await file.read()
    logo = encode_logo(content, file.content_type, settings.LOGO_MAX_BYTES)

    repo = OrganizationRepository(session)
    org = await _load(repo, current.organization_id)
    await repo.update(org, name=None, org_data={**(org.org_data or {}), "logo": logo})
    await session.commit()

    logger.info("Logo updated for organization %s (%s bytes)", org.id, len(content))
    return LogoOut(logo=logo, size=len(content), content_type=file.content_type)
