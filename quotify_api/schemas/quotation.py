from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict


class QuotationSaved(BaseModel):
    status: str = "success"
    message: str = "Quotation saved successfully"
    quotation_id: str
    quote_number: str
    total_amount: Any = 0


class QuotationOut(BaseModel):
    id: str
    quote_number: str
    status: str
    organization_id: int
    template_id: Optional[int] = None
    quotation_data: Dict[str, Any]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class QuotationSummary(BaseModel):
    id: str
    quote_number: str
    customer: Any = None
    total_amount: float = 0.0
    created_at: datetime


class QuotationDetail(QuotationOut):
    template: Optional[Dict[str, Any]] = None
    organization: Optional[Dict[str, Any]] = None


class QuotationEnvelope(BaseModel):
    status: str = "success"
    data: QuotationDetail


class QuotationList(BaseModel):
    status: str = "success"
    quotations: List[QuotationSummary]
    count: int
