from typing import Any, Dict, List, Optional, Tuple
import base64
import logging

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from quotify_api.core.exceptions import NotFoundError, ValidationFailed
from quotify_api.models.organization import Organization
from quotify_api.models.quotation import Quotation, QuotationTemplate
from quotify_api.rendering.preview import as_number
from quotify_api.repositories.organization import OrganizationRepository
from quotify_api.repositories.quotation import QuotationRepository
from quotify_api.repositories.template import TemplateRepository
from quotify_api.schemas.organization import CompanyDetailsIn
from quotify_api.schemas.quotation import (
    QuotationDetail,
    QuotationSaved,
    QuotationSummary,
)
from quotify_api.schemas.template import TemplateData

logger = logging.getLogger(__name__)

DEFAULT_QUOTE_PREFIX = "QT-"
DEFAULT_START_NUMBER = 1


# ------------------ company details ------------------


def merge_company_details(existing: Dict[str, Any], details: CompanyDetailsIn) -> Dict[str, Any]:
    """Overlay submitted company details on the stored org_data.

    Keys the form does not know about are kept. The running quotation
    counter is never reset by a settings save.
    """
    merged = dict(existing or {})
    merged.update(
        {
            "companyName": details.companyName,
            "email": details.email,
            "phone": details.phone,
            "website": details.website,
            "address": {
                "street": details.street,
                "city": details.city,
                "state": details.state,
                "postalCode": details.postalCode,
                "country": details.country,
            },
            "tax": {"gst": details.gst},
        }
    )
    if details.logo is not None:
        merged["logo"] = details.logo
    if details.owner_name is not None:
        merged["owner_name"] = details.owner_name

    numbering = dict(merged.get("quotationNumbering") or {})
    start = details.quotationStartNumber or numbering.get("startNumber") or DEFAULT_START_NUMBER
    merged["quotationNumbering"] = {
        "prefix": details.quotationPrefix or numbering.get("prefix") or DEFAULT_QUOTE_PREFIX,
        "startNumber": int(start),
        "currentNumber": int(numbering.get("currentNumber") or start),
    }
    return merged


def organization_view(org: Organization, fallback_email: Optional[str] = None) -> Dict[str, Any]:
    org_data = dict(org.org_data or {})
    if not org_data.get("email") and fallback_email:
        org_data["email"] = fallback_email
    numbering = dict(org_data.get("quotationNumbering") or {})
    numbering.setdefault("prefix", DEFAULT_QUOTE_PREFIX)
    org_data["quotationNumbering"] = numbering
    return {"id": org.id, "name": org.name, "org_data": org_data}


def encode_logo(content: bytes, content_type: Optional[str], max_bytes: int) -> str:
    if len(content) > max_bytes:
        raise ValidationFailed(
            f"Please upload an image smaller than {max_bytes // (1024 * 1024)}MB"
        )
    if not content_type or not content_type.startswith("image/"):
        raise ValidationFailed("Please upload an image file")
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


# ------------------ quotation numbering ------------------


def allocate_quote_number(org_data: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
    """Return the next quotation number and the org_data with the counter advanced."""
    numbering = dict((org_data or {}).get("quotationNumbering") or {})
    prefix = numbering.get("prefix") or DEFAULT_QUOTE_PREFIX
    start = int(numbering.get("startNumber") or DEFAULT_START_NUMBER)
    current = int(numbering.get("currentNumber") or start)

    updated = dict(org_data or {})
    updated["quotationNumbering"] = {
        **numbering,
        "prefix": prefix,
        "startNumber": start,
        "currentNumber": current + 1,
    }
    return f"{prefix}{current}", updated


# ------------------ templates ------------------


def load_template_data(raw: Optional[Dict[str, Any]]) -> TemplateData:
    try:
        return TemplateData.model_validate(raw or {})
    except ValidationError as e:
        # stored by an older client; fall back to defaults rather than failing the render
        logger.warning("stored template data is invalid, using defaults: %s", e)
        return TemplateData()


def template_view(template: QuotationTemplate) -> Dict[str, Any]:
    return {
        "id": template.id,
        "organization_id": template.organization_id,
        "template_name": template.template_name,
        "template_data": load_template_data(template.template_data).model_dump(),
    }


# ------------------ quotations ------------------


def check_quotation_body(body: Any) -> None:
    """The document is stored as sent; only its shape is checked."""
    if not isinstance(body, dict):
        raise ValidationFailed("Invalid quotation data")
    lines = body.get("quotation_data")
    if not body.get("customer") or not isinstance(lines, list) or not lines:
        raise ValidationFailed("Invalid quotation data")


def summarize(quotation: Quotation) -> QuotationSummary:
    data = quotation.quotation_data or {}
    return QuotationSummary(
        id=quotation.id,
        quote_number=quotation.quote_number,
        customer=data.get("customer"),
        total_amount=as_number(data.get("total_amount")),
        created_at=quotation.created_at,
    )


class QuotationService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.orgs = OrganizationRepository(session)
        self.templates = TemplateRepository(session)
        self.quotations = QuotationRepository(session)

    async def save(self, *, user_id: int, organization_id: int, body: Any) -> QuotationSaved:
        check_quotation_body(body)

        logger.info("Saving quotation for user: %s", user_id)

        template = await self.templates.get_for_organization(organization_id)
        if template is None:
            raise NotFoundError("No quotation template found for user")
        logger.info("Found template_id: %s", template.id)

        org = await self.orgs.get_for_update(organization_id)
        if org is None:
            raise NotFoundError("Organization not found")

        quote_number, org_data = allocate_quote_number(org.org_data or {})
        await self.orgs.update(org, name=None, org_data=org_data)

        quotation = await self.quotations.add(
            organization_id=organization_id,
            user_id=user_id,
            template_id=template.id,
            quote_number=quote_number,
            quotation_data=body,
        )
        await self.session.commit()

        logger.info("Quotation saved successfully with ID: %s (%s)", quotation.id, quote_number)
        return QuotationSaved(
            quotation_id=quotation.id,
            quote_number=quote_number,
            total_amount=body.get("total_amount") or 0,
        )

    async def detail(self, quotation_id: str, organization_id: int) -> QuotationDetail:
        quotation = await self.quotations.get(quotation_id, organization_id)
        if quotation is None:
            raise NotFoundError("Quotation not found")

        template = None
        if quotation.template_id is not None:
            template = await self.templates.get(quotation.template_id, organization_id)
        if template is None:
            logger.warning("quotation %s has no template", quotation.id)

        org = await self.orgs.get(organization_id)

        return QuotationDetail(
            id=quotation.id,
            quote_number=quotation.quote_number,
            status=quotation.status,
            organization_id=quotation.organization_id,
            template_id=quotation.template_id,
            quotation_data=quotation.quotation_data,
            created_at=quotation.created_at,
            template=template_view(template) if template else None,
            organization=organization_view(org) if org else None,
        )

    async def recent(self, organization_id: int, limit: int = 20) -> List[QuotationSummary]:
        rows = await self.quotations.list_for_organization(organization_id, limit=limit)
        return [summarize(q) for q in rows]
