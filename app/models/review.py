from typing import Optional, List
from uuid import UUID
from datetime import datetime
from sqlmodel import SQLModel, Field

from app.db.schema import ModerationStatus
from app.models.user import UserSummary, ReviewerSummary
from app.models.partner import PartnerSummary


class ReviewCreate(SQLModel):
    """
    Input: a client's rating of a partner.
    Rating is range-checked by the service, so non-integral values are
    accepted here and rejected with a readable message.
    """
    partner_id: UUID
    inquiry_id: Optional[UUID] = None
    rating: float = Field(description="Whole number from 1 to 5.")
    comment: Optional[str] = Field(default="", max_length=1000)


class ReviewModeration(SQLModel):
    status: str = Field(description="'approved' or 'rejected'.")
    comment: Optional[str] = Field(default=None, max_length=1000)


class ReviewRead(SQLModel):
    id: UUID
    client: UserSummary
    partner: PartnerSummary
    inquiry_id: Optional[UUID] = None
    rating: int
    comment: str
    moderation_status: ModerationStatus
    moderation_comment: Optional[str] = None
    moderated_by: Optional[UserSummary] = None
    created_at: datetime


class PublicReviewRead(SQLModel):
    """An approved review as shown to anonymous visitors."""
    id: UUID
    client: ReviewerSummary
    partner: PartnerSummary
    rating: int
    comment: str
    created_at: datetime


class PartnerReviewList(SQLModel):
    reviews: List[PublicReviewRead]
    total: int
    average_rating: float


class ReviewList(SQLModel):
    reviews: List[ReviewRead]
    total: int
