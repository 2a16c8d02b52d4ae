from .user import User
from .organization import Organization, OrganizationUser
from .quotation import Quotation, QuotationTemplate
from .conversation import ConversationLog, Speaker
from .auth import TokenData

__all__ = [
    "User",
    "Organization",
    "OrganizationUser",
    "Quotation",
    "QuotationTemplate",
    "ConversationLog",
    "Speaker",
    "TokenData",
]
