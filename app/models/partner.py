from typing import Optional, List, Dict, Any
from uuid import UUID
from datetime import datetime
from sqlmodel import SQLModel, Field

from app.db.schema import PartnerStatus
from app.models.user import UserSummary


class PartnerOnboard(SQLModel):
    """
    Input: the business profile a partner submits for verification.
    Business rules (non-blank fields, 12-digit ID) are enforced by the service
    so the API can answer with precise messages.
    """
    business_name: str = Field(max_length=150)
    service_categories: List[str] = Field(
        default_factory=list,
        description="Services offered. Example: ['wedding', 'portrait']"
    )
    city: str = Field(max_length=100)
    state: str = Field(max_length=100)
    national_id: str = Field(description="12-digit national identity number.")
    document_metadata: Dict[str, Any] = Field(default_factory=dict)
    sample_portfolio_urls: List[str] = Field(default_factory=list)


class PartnerUpdate(SQLModel):
    """
    Profile edits. Verification state and identity documents are not editable here.
    """
    business_name: Optional[str] = Field(default=None, max_length=150)
    service_categories: Optional[List[str]] = None
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)


class PartnerSummary(SQLModel):
    """The 'populated' view of a partner embedded in inquiries and reviews."""
    id: UUID
    business_name: str
    city: str
    state: str
    service_categories: List[str]


class PartnerRead(SQLModel):
    id: UUID
    user: UserSummary
    business_name: str
    service_categories: List[str]
    city: str
    state: str
    document_metadata: Dict[str, Any]
    sample_portfolio_urls: List[str]
    status: PartnerStatus
    verification_comment: Optional[str] = None
    verified_by: Optional[UserSummary] = None
    verified_at: Optional[datetime] = None
    created_at: datetime


class VerificationDecision(SQLModel):
    status: str = Field(description="'verified' or 'rejected'.")
    comment: Optional[str] = Field(default=None, max_length=1000)


class PendingVerificationPage(SQLModel):
    partners: List[PartnerRead]
    total: int
    page: int
    pages: int
