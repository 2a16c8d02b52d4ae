from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from quotify_api.auth.deps import CurrentUser, get_current_user, get_interactive_user
from quotify_api.core.config import settings
from quotify_api.core.db import get_db
from quotify_api.domain.services import QuotationService, load_template_data
from quotify_api.rendering.preview import MISSING_TEMPLATE_PAGE, render_quotation_html
from quotify_api.schemas.quotation import (
    QuotationEnvelope,
    QuotationList,
    QuotationSaved,
)

router = APIRouter(prefix="/quotations", tags=["quotations"])


@router.post("", response_model=QuotationSaved, summary="Persist a finished quotation")
async def save_quotation(
    body: Any = Body(default=None),
    current: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> QuotationSaved:
    return await QuotationService(session).save(
        user_id=current.id, organization_id=current.organization_id, body=body
    )


@router.get("", response_model=QuotationList)
async def list_quotations(
    limit: int = Query(default=20, ge=1, le=100),
    current: CurrentUser = Depends(get_interactive_user),
    session: AsyncSession = Depends(get_db),
) -> QuotationList:
    items = await QuotationService(session).recent(current.organization_id, limit=limit)
    return QuotationList(quotations=items, count=len(items))


@router.get("/{quotation_id}", response_model=QuotationEnvelope)
async def get_quotation(
    quotation_id: str,
    current: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> QuotationEnvelope:
    detail = await QuotationService(session).detail(quotation_id, current.organization_id)
    return QuotationEnvelope(data=detail)


@router.get("/{quotation_id}/preview", response_class=HTMLResponse)
async def preview_quotation(
    quotation_id: str,
    current: CurrentUser = Depends(get_interactive_user),
    session: AsyncSession = Depends(get_db),
) -> HTMLResponse:
    detail = await QuotationService(session).detail(quotation_id, current.organization_id)
    if detail.template is None:
        return HTMLResponse(MISSING_TEMPLATE_PAGE, status_code=404)

    html = render_quotation_html(
        quotation=detail.model_dump(),
        template_data=load_template_data(detail.template.get("template_data")),
        organization=detail.organization,
        tax_rate=settings.TAX_RATE,
        validity_days=settings.QUOTATION_VALIDITY_DAYS,
        currency=settings.CURRENCY_SYMBOL,
    )
    return HTMLResponse(html)
