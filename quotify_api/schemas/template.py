from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class _Group(BaseModel):
    # keys written by newer clients survive a load/save round trip
    model_config = ConfigDict(extra="allow")


class Typography(_Group):
    fontSize: Literal["small", "medium", "large"] = "medium"
    fontFamily: str = "default"
    totalsSize: Literal["small", "medium", "large"] = "medium"
    grandTotalSize: Literal["small", "medium", "large"] = "large"


class HeaderSettings(_Group):
    showBorder: bool = True
    backgroundColor: Optional[str] = None
    logoSize: int = Field(default=80, ge=16, le=400)


class Sections(_Group):
    showLogo: bool = True
    showCompanyName: bool = True
    showAddress: bool = True
    showEmail: bool = True
    showPhone: bool = True
    showWebsite: bool = True
    showGST: bool = True
    showCustomerSection: bool = True
    showTerms: bool = True
    showNotes: bool = True
    showSignature: bool = True
    showDate: bool = True
    showQuotationNumber: bool = True
    showValidUntil: bool = True


class TableSettings(_Group):
    borderStyle: Literal["none", "light", "medium", "heavy"] = "medium"
    showHeader: bool = True
    showItemNumber: bool = True
    showDescription: bool = True
    showQuantity: bool = True
    showRate: bool = True
    showAmount: bool = True
    showTax: bool = True
    showDiscount: bool = False
    showHSN: bool = False
    alternateRowColor: bool = True
    rowBorders: bool = True
    headerBgColor: Optional[str] = None


class TotalsSettings(_Group):
    showSubtotal: bool = True
    showTaxBreakdown: bool = True
    showDiscountRow: bool = False
    showShipping: bool = False
    showGrandTotal: bool = True
    position: Literal["right", "full"] = "right"


class ContentSettings(_Group):
    customerSectionTitle: str = "Bill To"
    termsTitle: str = "Terms & Conditions"
    termsContent: str = (
        "Payment is due within 30 days of invoice date. "
        "Late payments may incur additional charges."
    )
    notesTitle: str = "Notes"
    notesContent: str = "Thank you for your business!"
    signatureLabel: str = "Authorized Signature"
    watermarkText: str = "DRAFT"
    itemColumnName: str = "Description"
    quantityColumnName: str = "Qty"
    rateColumnName: str = "Rate"
    totalColumnName: str = "Amount"
    subtotalLabel: str = "Subtotal"
    taxLabel: Optional[str] = None
    grandTotalLabel: str = "Total Amount"
    footerText: Optional[str] = None


class AdvancedSettings(_Group):
    showWatermark: bool = False
    showPageNumbers: bool = False
    showSignatureDate: bool = True
    showFooter: bool = True
    pageMargin: int = Field(default=20, ge=0, le=100)
    sectionSpacing: int = Field(default=16, ge=0, le=100)


class TemplateData(_Group):
    type: Literal["modern", "classic", "minimal"] = "modern"
    primaryColor: str = "#3b82f6"
    secondaryColor: str = "#64748b"
    accentColor: str = "#10b981"
    logoPosition: Literal["left", "center", "right"] = "left"
    pageSize: Literal["A4", "Letter", "Legal"] = "A4"
    headerText: str = "QUOTATION"
    footerText: str = "Thank you for your business"

    typography: Typography = Field(default_factory=Typography)
    header: HeaderSettings = Field(default_factory=HeaderSettings)
    sections: Sections = Field(default_factory=Sections)
    table: TableSettings = Field(default_factory=TableSettings)
    totals: TotalsSettings = Field(default_factory=TotalsSettings)
    content: ContentSettings = Field(default_factory=ContentSettings)
    advanced: AdvancedSettings = Field(default_factory=AdvancedSettings)


class TemplateIn(BaseModel):
    template_name: Optional[str] = None
    template_data: TemplateData = Field(default_factory=TemplateData)


class TemplateOut(BaseModel):
    id: Optional[int] = None
    organization_id: int
    template_name: str = "Default"
    template_data: TemplateData
    exists: bool = True
    updated_at: Optional[datetime] = None
