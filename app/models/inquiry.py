from typing import Optional, List
from uuid import UUID
from datetime import date, datetime
from sqlmodel import SQLModel, Field

from app.db.schema import InquiryStatus
from app.models.user import UserSummary
from app.models.partner import PartnerSummary


class InquiryCreate(SQLModel):
    """
    Input: a client's shoot request.
    Dates are compared by calendar day; an event today is accepted.
    """
    category: str = Field(max_length=100, description="Example: 'wedding'")
    event_date: date = Field(description="Example: '2026-12-14'")
    budget: float = Field(description="Example: 15000")
    city: str = Field(max_length=100, description="Example: 'Pune'")
    reference_image_url: Optional[str] = None
    description: Optional[str] = None


class InquiryStatusUpdate(SQLModel):
    status: str = Field(description="One of: new, responded, booked, closed.")


class LeadResponse(SQLModel):
    response_message: str = Field(max_length=2000)
    status: str = Field(
        default=InquiryStatus.RESPONDED.value,
        description="Status to move the inquiry to. Defaults to 'responded'."
    )


class InquiryRead(SQLModel):
    id: UUID
    client: UserSummary
    category: str
    event_date: date
    budget: float
    city: str
    reference_image_url: str
    description: str
    status: InquiryStatus
    assigned_partners: List[PartnerSummary]
    created_at: datetime
    updated_at: datetime


class InquiryCreated(SQLModel):
    inquiry: InquiryRead
    matched_partners_count: int


class InquiryList(SQLModel):
    inquiries: List[InquiryRead]
    total: int


class LeadList(SQLModel):
    leads: List[InquiryRead]
    total: int


class InquiryStats(SQLModel):
    total: int = 0
    new: int = 0
    responded: int = 0
    booked: int = 0
    closed: int = 0
