from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class CompanyDetailsIn(BaseModel):
    companyName: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    website: str = ""
    logo: Optional[str] = None
    owner_name: Optional[str] = None

    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    postalCode: str = Field(..., min_length=1)
    country: str = ""

    gst: str = ""

    quotationPrefix: Optional[str] = None
    quotationStartNumber: Optional[int] = Field(default=None, ge=1)


class OrganizationOut(BaseModel):
    id: int
    name: Optional[str] = None
    org_data: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(from_attributes=True)


class LogoOut(BaseModel):
    logo: str
    size: int
    content_type: str
